"""Capability interfaces for plugging a Groth16 toolchain into the pipeline."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..codec import NativeProof
from ..vkey import VerificationKey


@dataclass(frozen=True)
class CircuitInputs:
    """Signals handed to the witness generator."""
    position: int
    claim_type: int
    claim_value: int
    expected_result: bool

    def to_dict(self) -> dict[str, int]:
        return {
            "position": self.position,
            "claimType": self.claim_type,
            "claimValue": self.claim_value,
            "expectedResult": 1 if self.expected_result else 0,
        }


@dataclass
class ProverOutput:
    """Outputs from Prover.full_prove."""
    proof: NativeProof
    public_signals: list[str]
    extra: dict[str, Any] = field(default_factory=dict)


class Prover(ABC):
    """Computes the witness and the Groth16 proof for one claim."""

    name: str = "unknown"

    @abstractmethod
    async def full_prove(self, inputs: CircuitInputs) -> ProverOutput:
        """Return the proof and public signals, or raise on failure."""


class Verifier(ABC):
    """Runs the Groth16 pairing check."""

    name: str = "unknown"

    @abstractmethod
    async def verify(
        self,
        vkey: VerificationKey,
        public_signals: list[str],
        proof: NativeProof,
    ) -> bool:
        """Return True when the proof is valid for ``public_signals``."""
