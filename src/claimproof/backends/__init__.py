"""Prover/verifier backends and registry."""

from .base import CircuitInputs, Prover, ProverOutput, Verifier
from .snarkjs import SnarkjsProver, SnarkjsVerifier

BACKENDS = {
    SnarkjsProver.name: (SnarkjsProver, SnarkjsVerifier),
}

__all__ = [
    "BACKENDS",
    "CircuitInputs",
    "Prover",
    "ProverOutput",
    "Verifier",
    "SnarkjsProver",
    "SnarkjsVerifier",
]
