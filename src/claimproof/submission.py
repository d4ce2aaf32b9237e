"""Claim submission message for the game contract.

The contract call carries the claim, the result the claimer asserts and the
proof in the on-chain byte layout. Public inputs travel as 32-byte words.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Union

from .claims import ClaimType, ClaimTypeLike
from .codec import NativeProof, ProofBytes, convert_proof, encode_public_signals


@dataclass(frozen=True)
class ClaimSubmission:
    claim_type: ClaimType
    claim_value: int
    expected_result: bool
    proof: ProofBytes
    public_inputs: tuple[bytes, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Argument map for the ``submit_claim`` contract call."""
        data: dict[str, Any] = {
            "claim_type": int(self.claim_type),
            "claim_value": self.claim_value,
            "expected_result": self.expected_result,
            "proof": self.proof.to_dict(),
        }
        if self.public_inputs:
            data["public_inputs"] = [word.hex() for word in self.public_inputs]
        return data


def build_claim_submission(
    claim_type: ClaimTypeLike,
    claim_value: int,
    expected_result: bool,
    native_proof: Union[NativeProof, dict[str, Any]],
    public_signals: Optional[Iterable[str]] = None,
) -> ClaimSubmission:
    """Convert a snarkjs proof and wrap it with the claim it proves."""
    return ClaimSubmission(
        claim_type=ClaimType.parse(claim_type),
        claim_value=int(claim_value),
        expected_result=bool(expected_result),
        proof=convert_proof(native_proof),
        public_inputs=tuple(encode_public_signals(public_signals or ())),
    )


__all__ = ["ClaimSubmission", "build_claim_submission"]
