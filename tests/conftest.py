"""Pytest configuration and fixtures for claimproof tests."""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import pytest

from claimproof.backends import CircuitInputs, Prover, ProverOutput, Verifier
from claimproof.codec import NativeProof
from claimproof.vkey import VerificationKey, VerificationKeyCache, reset_shared_caches

FIXTURES = Path(__file__).parent / "fixtures" / "groth16"


class FakeProver(Prover):
    """Returns the fixture proof and echoes the circuit inputs as public signals."""

    name = "fake"

    def __init__(self, proof: NativeProof, error: Optional[BaseException] = None) -> None:
        self.proof = proof
        self.error = error
        self.calls: list[CircuitInputs] = []
        self.release: Optional[asyncio.Event] = None

    async def full_prove(self, inputs: CircuitInputs) -> ProverOutput:
        self.calls.append(inputs)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        signals = [str(inputs.to_dict()["expectedResult"]), str(inputs.claim_type), str(inputs.claim_value)]
        return ProverOutput(proof=self.proof, public_signals=signals)


class FakeVerifier(Verifier):
    name = "fake"

    def __init__(self, result: bool = True, error: Optional[BaseException] = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[VerificationKey, list[str], NativeProof]] = []

    async def verify(self, vkey, public_signals, proof) -> bool:
        self.calls.append((vkey, public_signals, proof))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def _reset_vkey_caches():
    reset_shared_caches()
    yield
    reset_shared_caches()


@pytest.fixture
def proof_dict() -> dict:
    """A snarkjs groth16 proof.json (projective coordinates, bn128)."""
    return json.loads((FIXTURES / "proof.json").read_text())


@pytest.fixture
def public_signals() -> list[str]:
    return json.loads((FIXTURES / "public.json").read_text())


@pytest.fixture
def minimal_proof_dict() -> dict:
    return {
        "pi_a": ["1", "2"],
        "pi_b": [["1", "2"], ["3", "4"]],
        "pi_c": ["5", "6"],
        "protocol": "groth16",
        "curve": "bn128",
    }


@pytest.fixture
def native_proof(proof_dict) -> NativeProof:
    return NativeProof.from_dict(proof_dict)


@pytest.fixture
def vkey_path() -> Path:
    return FIXTURES / "verification_key.json"


@pytest.fixture
def vkey_dict(vkey_path) -> dict:
    return json.loads(vkey_path.read_text())


@pytest.fixture
def fake_prover(native_proof) -> FakeProver:
    return FakeProver(native_proof)


@pytest.fixture
def fake_verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def counting_cache(vkey_dict):
    """A cache whose loader counts fetches instead of touching the network."""
    calls = {"count": 0}

    def loader(uri: str) -> VerificationKey:
        calls["count"] += 1
        return VerificationKey.from_dict(vkey_dict, uri=uri)

    cache = VerificationKeyCache("https://example.test/verification_key.json", loader=loader)
    return cache, calls
