"""Proof orchestration: local claim evaluation plus external prove/verify.

The expected result is computed locally before proving because it is a
public input of the circuit: the proof attests that the hidden position
yields exactly this result.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from .backends import CircuitInputs, Prover, Verifier
from .claims import ClaimType, ClaimTypeLike, check_claim_value, evaluate_claim
from .codec import NativeProof
from .errors import ArtifactLoadError, ProofGenerationFailure
from .vkey import VerificationKeyCache

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimProof:
    """A generated proof together with the truth value it attests."""
    proof: NativeProof
    public_signals: tuple[str, ...]
    is_true: bool

    def to_dict(self) -> dict:
        return {
            "proof": self.proof.to_dict(),
            "publicSignals": list(self.public_signals),
            "isTrue": self.is_true,
        }


class ProofOrchestrator:
    """Composes the claim evaluator with an external prover and verifier."""

    def __init__(
        self,
        prover: Prover,
        verifier: Verifier,
        vkey_cache: VerificationKeyCache,
    ) -> None:
        self.prover = prover
        self.verifier = verifier
        self.vkey_cache = vkey_cache

    async def generate_proof(
        self,
        position: int,
        claim_type: ClaimTypeLike,
        claim_value: int,
    ) -> ClaimProof:
        """Prove a claim about ``position``.

        Raises:
            InvalidPosition, UnsupportedClaimType, InvalidClaimValue: before
                the prover is invoked.
            ArtifactLoadError: the circuit artifacts are unreachable.
            ProofGenerationFailure: the prover failed; the cause is chained.
        """
        is_true = evaluate_claim(position, claim_type, claim_value)
        kind = ClaimType.parse(claim_type)
        claim_value = check_claim_value(claim_value)
        inputs = CircuitInputs(
            position=position,
            claim_type=int(kind),
            claim_value=claim_value,
            expected_result=is_true,
        )
        LOGGER.info("Generating proof for %s claim %s (expected %s)", kind.label, claim_value, is_true)

        started = time.perf_counter()
        try:
            output = await self.prover.full_prove(inputs)
        except ArtifactLoadError:
            raise
        except Exception as exc:
            raise ProofGenerationFailure(str(exc) or type(exc).__name__) from exc

        LOGGER.info("Proof generated in %.2fs", time.perf_counter() - started)
        LOGGER.debug("Public signals: %s", output.public_signals)
        return ClaimProof(
            proof=output.proof,
            public_signals=tuple(output.public_signals),
            is_true=is_true,
        )

    def submit_proof(
        self,
        position: int,
        claim_type: ClaimTypeLike,
        claim_value: int,
    ) -> "asyncio.Task[ClaimProof]":
        """Start proving in the background and return the cancellable task.

        Inputs are validated immediately so malformed claims fail before a
        task is scheduled.
        """
        evaluate_claim(position, claim_type, claim_value)
        return asyncio.create_task(self.generate_proof(position, claim_type, claim_value))

    async def verify(self, proof: NativeProof, public_signals: list[str]) -> bool:
        """Check a proof locally against the cached verification key."""
        vkey = await self.vkey_cache.aget()
        started = time.perf_counter()
        valid = await self.verifier.verify(vkey, list(public_signals), proof)
        LOGGER.info("Proof verification result: %s (%.2fs)", valid, time.perf_counter() - started)
        return bool(valid)

    async def generate_and_verify(
        self,
        position: int,
        claim_type: ClaimTypeLike,
        claim_value: int,
    ) -> tuple[ClaimProof, bool]:
        claim = await self.generate_proof(position, claim_type, claim_value)
        verified = await self.verify(claim.proof, list(claim.public_signals))
        return claim, verified


def build_orchestrator(config: dict, backend: str = "snarkjs") -> ProofOrchestrator:
    """Wire the configured backend and the shared verification key cache."""
    from .backends import BACKENDS
    from .vkey import shared_cache

    try:
        prover_cls, verifier_cls = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown backend {backend!r}; choose from {sorted(BACKENDS)}") from None
    cache = shared_cache(config["circuit"]["vkey_uri"], timeout=config.get("fetch", {}).get("timeout", 30))
    return ProofOrchestrator(
        prover=prover_cls.from_config(config),
        verifier=verifier_cls.from_config(config),
        vkey_cache=cache,
    )


__all__ = ["ClaimProof", "ProofOrchestrator", "build_orchestrator"]
