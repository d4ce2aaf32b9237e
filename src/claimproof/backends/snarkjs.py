"""snarkjs command-line backend.

Proving:   snarkjs groth16 fullprove input.json circuit.wasm circuit.zkey proof.json public.json
Verifying: snarkjs groth16 verify verification_key.json public.json proof.json

A rejected proof verifies as False; any other snarkjs failure raises
SnarkjsError.

Both run as subprocesses in a scratch directory so the event loop is never
blocked. Cancelling the awaiting task stops the wait, not the subprocess.
"""
from __future__ import annotations

import asyncio
import json
import logging
import tempfile
import time
from pathlib import Path
from typing import Any, Optional

from ..codec import NativeProof
from ..errors import ArtifactLoadError
from ..vkey import VerificationKey
from .base import CircuitInputs, Prover, ProverOutput, Verifier

LOGGER = logging.getLogger(__name__)

# `groth16 verify` exits 1 with this message for a well-formed proof that fails the pairing check.
INVALID_PROOF_MARKER = "Invalid proof"


class SnarkjsError(RuntimeError):
    """snarkjs exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        detail = stderr.strip() or "no output"
        super().__init__(f"snarkjs {' '.join(args)} exited with {returncode}: {detail}")
        self.returncode = returncode
        self.stderr = stderr


async def run_snarkjs(
    command: str,
    args: list[str],
    *,
    cwd: Path,
    timeout: Optional[float] = None,
) -> tuple[int, str, str]:
    """Run snarkjs and return ``(returncode, stdout, stderr)``."""
    proc = await asyncio.create_subprocess_exec(
        command,
        *args,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        if timeout:
            out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        else:
            out, err = await proc.communicate()
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise
    return proc.returncode, out.decode(errors="replace"), err.decode(errors="replace")


def _write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data))


class SnarkjsProver(Prover):
    """Groth16 prover backed by ``snarkjs groth16 fullprove``."""

    name = "snarkjs"

    def __init__(
        self,
        wasm_path: Path | str,
        zkey_path: Path | str,
        *,
        command: str = "snarkjs",
        timeout: Optional[float] = None,
    ) -> None:
        self.wasm_path = Path(wasm_path)
        self.zkey_path = Path(zkey_path)
        self.command = command
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: dict) -> "SnarkjsProver":
        circuit = config.get("circuit", {})
        snarkjs = config.get("snarkjs", {})
        return cls(
            circuit["wasm_path"],
            circuit["zkey_path"],
            command=snarkjs.get("command", "snarkjs"),
            timeout=snarkjs.get("timeout"),
        )

    def _check_artifacts(self) -> None:
        for path in (self.wasm_path, self.zkey_path):
            if not path.is_file():
                raise ArtifactLoadError(str(path), "circuit artifact not found")

    async def full_prove(self, inputs: CircuitInputs) -> ProverOutput:
        self._check_artifacts()
        started = time.perf_counter()
        with tempfile.TemporaryDirectory(prefix="claimproof-prove-") as tmp:
            work = Path(tmp)
            _write_json(work / "input.json", inputs.to_dict())
            args = [
                "groth16",
                "fullprove",
                "input.json",
                str(self.wasm_path.resolve()),
                str(self.zkey_path.resolve()),
                "proof.json",
                "public.json",
            ]
            returncode, _out, err = await run_snarkjs(self.command, args, cwd=work, timeout=self.timeout)
            if returncode != 0:
                raise SnarkjsError(args, returncode, err)
            proof = NativeProof.from_dict(json.loads((work / "proof.json").read_text()))
            public_signals = [str(s) for s in json.loads((work / "public.json").read_text())]
        elapsed = time.perf_counter() - started
        LOGGER.debug("snarkjs fullprove finished in %.2fs", elapsed)
        return ProverOutput(proof=proof, public_signals=public_signals, extra={"prove_time_sec": elapsed})


class SnarkjsVerifier(Verifier):
    """Groth16 verifier backed by ``snarkjs groth16 verify``."""

    name = "snarkjs"

    def __init__(self, *, command: str = "snarkjs", timeout: Optional[float] = None) -> None:
        self.command = command
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: dict) -> "SnarkjsVerifier":
        snarkjs = config.get("snarkjs", {})
        return cls(command=snarkjs.get("command", "snarkjs"), timeout=snarkjs.get("timeout"))

    async def verify(
        self,
        vkey: VerificationKey,
        public_signals: list[str],
        proof: NativeProof,
    ) -> bool:
        with tempfile.TemporaryDirectory(prefix="claimproof-verify-") as tmp:
            work = Path(tmp)
            _write_json(work / "verification_key.json", vkey.to_dict())
            _write_json(work / "public.json", list(public_signals))
            _write_json(work / "proof.json", proof.to_dict())
            args = ["groth16", "verify", "verification_key.json", "public.json", "proof.json"]
            returncode, out, err = await run_snarkjs(self.command, args, cwd=work, timeout=self.timeout)
        if returncode == 0:
            return True
        if returncode == 1 and INVALID_PROOF_MARKER in out + err:
            LOGGER.debug("snarkjs verify rejected proof: %s", (err or out).strip())
            return False
        raise SnarkjsError(args, returncode, err or out)


__all__ = ["SnarkjsError", "SnarkjsProver", "SnarkjsVerifier", "run_snarkjs"]
