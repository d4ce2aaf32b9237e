"""claimproof - zero-knowledge claim proofs for the 3x3 hidden-position game.

Usage:
    from claimproof import ClaimType, evaluate_claim, convert_proof

    evaluate_claim(5, ClaimType.ADJACENT, 2)   # True
    proof_bytes = convert_proof(snarkjs_proof)  # ProofBytes(a=64B, b=128B, c=64B)

    orchestrator = build_orchestrator(load_config())
    claim = await orchestrator.generate_proof(5, "row", 1)
"""

from .claims import (
    GRID_SIZE,
    POSITIONS,
    ClaimType,
    are_adjacent,
    cell_of,
    claim_domain,
    col_of,
    evaluate_claim,
    iter_claims,
    row_of,
    truth_table,
)
from .codec import (
    G1Point,
    G2Point,
    NativeProof,
    ProofBytes,
    convert_proof,
    decimal_to_bytes32,
    encode_public_signals,
    g1_to_bytes,
    g2_to_bytes,
)
from .config import load_config
from .errors import (
    ArtifactLoadError,
    ClaimProofError,
    InvalidClaimValue,
    InvalidPosition,
    ProofFormatError,
    ProofGenerationFailure,
    UnsupportedClaimType,
)
from .orchestrator import ClaimProof, ProofOrchestrator, build_orchestrator
from .submission import ClaimSubmission, build_claim_submission
from .transport import (
    deserialize_proof,
    deserialize_proof_bytes,
    serialize_proof,
    serialize_proof_bytes,
)
from .vkey import VerificationKey, VerificationKeyCache

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Claims
    "GRID_SIZE",
    "POSITIONS",
    "ClaimType",
    "are_adjacent",
    "cell_of",
    "claim_domain",
    "col_of",
    "evaluate_claim",
    "iter_claims",
    "row_of",
    "truth_table",
    # Codec
    "G1Point",
    "G2Point",
    "NativeProof",
    "ProofBytes",
    "convert_proof",
    "decimal_to_bytes32",
    "encode_public_signals",
    "g1_to_bytes",
    "g2_to_bytes",
    # Transport
    "serialize_proof",
    "deserialize_proof",
    "serialize_proof_bytes",
    "deserialize_proof_bytes",
    # Orchestration
    "ClaimProof",
    "ProofOrchestrator",
    "build_orchestrator",
    "VerificationKey",
    "VerificationKeyCache",
    "ClaimSubmission",
    "build_claim_submission",
    "load_config",
    # Errors
    "ClaimProofError",
    "InvalidPosition",
    "UnsupportedClaimType",
    "InvalidClaimValue",
    "ArtifactLoadError",
    "ProofGenerationFailure",
    "ProofFormatError",
]
