"""Proof commands: prove, verify, convert."""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import click

from ..backends.snarkjs import SnarkjsError
from ..claims import ClaimType
from ..codec import NativeProof, convert_proof, encode_public_signals
from ..errors import (
    ArtifactLoadError,
    ClaimProofError,
    InvalidClaimValue,
    InvalidPosition,
    ProofGenerationFailure,
    UnsupportedClaimType,
)
from ..orchestrator import build_orchestrator
from ..submission import build_claim_submission
from .claim_cmd import CLAIM_TYPE_CHOICE
from .exit_codes import (
    EXIT_ARTIFACT,
    EXIT_MALFORMED,
    EXIT_PROOF_INVALID,
    EXIT_PROVER_FAILED,
    EXIT_VERIFIER_FAILED,
)


def _load_proof_file(path: Path) -> tuple[NativeProof, list[str], dict[str, Any]]:
    """Accept either a bare snarkjs proof.json or the output of ``prove``."""
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        click.echo(f"Error: cannot read {path}: {e}", err=True)
        raise SystemExit(EXIT_MALFORMED)
    if not isinstance(data, dict):
        click.echo(f"Error: {path} does not contain a JSON object", err=True)
        raise SystemExit(EXIT_MALFORMED)
    proof_data = data.get("proof", data)
    try:
        proof = NativeProof.from_dict(proof_data)
    except ClaimProofError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_MALFORMED)
    signals = [str(s) for s in data.get("publicSignals", [])]
    return proof, signals, data


def _load_public_file(path: Path) -> list[str]:
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        click.echo(f"Error: cannot read {path}: {e}", err=True)
        raise SystemExit(EXIT_MALFORMED)
    if not isinstance(data, list):
        click.echo(f"Error: {path} does not contain a JSON array of public signals", err=True)
        raise SystemExit(EXIT_MALFORMED)
    return [str(s) for s in data]


@click.command("prove")
@click.argument("position", type=int)
@click.argument("claim_type", type=CLAIM_TYPE_CHOICE)
@click.argument("claim_value", type=int)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the proof JSON here")
@click.option("--verify/--no-verify", "also_verify", default=False, help="Verify the proof after generating it")
@click.pass_context
def prove_command(
    ctx: click.Context,
    position: int,
    claim_type: str,
    claim_value: int,
    output: Optional[Path],
    also_verify: bool,
) -> None:
    """Prove CLAIM_TYPE CLAIM_VALUE for a hidden POSITION."""
    orchestrator = build_orchestrator(ctx.obj["config"])
    try:
        if also_verify:
            claim, verified = asyncio.run(orchestrator.generate_and_verify(position, claim_type, claim_value))
        else:
            claim = asyncio.run(orchestrator.generate_proof(position, claim_type, claim_value))
            verified = None
    except (InvalidPosition, UnsupportedClaimType, InvalidClaimValue) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_MALFORMED)
    except ArtifactLoadError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_ARTIFACT)
    except ProofGenerationFailure as e:
        click.echo(f"Proof generation failed (retryable): {e}", err=True)
        raise SystemExit(EXIT_PROVER_FAILED)
    except (SnarkjsError, OSError, asyncio.TimeoutError) as e:
        click.echo(f"Verifier failed: {e}", err=True)
        raise SystemExit(EXIT_VERIFIER_FAILED)

    payload = json.dumps(claim.to_dict(), indent=2)
    if output:
        output.write_text(payload)
        click.echo(f"Proof written to {output}")
    else:
        click.echo(payload)
    click.echo(f"Claim is {'true' if claim.is_true else 'false'}", err=output is None)
    if verified is not None:
        click.echo(f"Verified: {verified}", err=output is None)
        if not verified:
            raise SystemExit(EXIT_PROOF_INVALID)


@click.command("verify")
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--public", "public_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="public.json when PROOF_FILE is a bare proof")
@click.pass_context
def verify_command(ctx: click.Context, proof_file: Path, public_file: Optional[Path]) -> None:
    """Verify a proof locally with the configured verification key."""
    proof, signals, _data = _load_proof_file(proof_file)
    if public_file is not None:
        signals = _load_public_file(public_file)
    orchestrator = build_orchestrator(ctx.obj["config"])
    try:
        valid = asyncio.run(orchestrator.verify(proof, signals))
    except ArtifactLoadError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_ARTIFACT)
    except (SnarkjsError, OSError, asyncio.TimeoutError) as e:
        click.echo(f"Verifier failed: {e}", err=True)
        raise SystemExit(EXIT_VERIFIER_FAILED)
    click.echo("OK" if valid else "INVALID")
    if not valid:
        raise SystemExit(EXIT_PROOF_INVALID)


@click.command("convert")
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--claim-type", type=CLAIM_TYPE_CHOICE, default=None, help="Emit a full claim submission message")
@click.option("--claim-value", type=int, default=None)
@click.option("--expected/--not-expected", "expected", default=None, help="Asserted claim result (defaults to isTrue from the file)")
def convert_command(
    proof_file: Path,
    claim_type: Optional[str],
    claim_value: Optional[int],
    expected: Optional[bool],
) -> None:
    """Print a proof in the on-chain byte layout (hex)."""
    proof, signals, data = _load_proof_file(proof_file)

    if claim_type is None:
        out = convert_proof(proof).to_dict()
        if signals:
            out["public_inputs"] = [w.hex() for w in encode_public_signals(signals)]
        click.echo(json.dumps(out, indent=2))
        return

    if claim_value is None:
        click.echo("Error: --claim-value is required with --claim-type", err=True)
        raise SystemExit(EXIT_MALFORMED)
    if expected is None:
        if "isTrue" not in data:
            click.echo("Error: pass --expected/--not-expected or a proof file with isTrue", err=True)
            raise SystemExit(EXIT_MALFORMED)
        expected = bool(data["isTrue"])
    submission = build_claim_submission(ClaimType.parse(claim_type), claim_value, expected, proof, signals)
    click.echo(json.dumps(submission.to_dict(), indent=2))
