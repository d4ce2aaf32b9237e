"""Error taxonomy for the claim proof pipeline."""
from __future__ import annotations


class ClaimProofError(Exception):
    """Base class for every error raised by claimproof."""


class InvalidPosition(ClaimProofError, ValueError):
    """A grid position fell outside [1, 9]."""

    def __init__(self, position: object) -> None:
        super().__init__(f"Position must be between 1 and 9, got {position!r}")
        self.position = position


class UnsupportedClaimType(ClaimProofError, ValueError):
    """A claim type is not one of row, column or adjacent."""

    def __init__(self, claim_type: object) -> None:
        super().__init__(f"Unsupported claim type: {claim_type!r}")
        self.claim_type = claim_type


class InvalidClaimValue(ClaimProofError, ValueError):
    """A claim value is not an integer."""

    def __init__(self, claim_value: object) -> None:
        super().__init__(f"Claim value must be an integer, got {claim_value!r}")
        self.claim_value = claim_value


class ArtifactLoadError(ClaimProofError):
    """A circuit or verification key artifact could not be loaded."""

    def __init__(self, uri: str, reason: str) -> None:
        super().__init__(f"Failed to load artifact {uri}: {reason}")
        self.uri = uri
        self.reason = reason


class ProofGenerationFailure(ClaimProofError):
    """The external prover rejected the witness or failed internally."""


class ProofFormatError(ClaimProofError, ValueError):
    """A proof value or its serialized form is malformed."""


__all__ = [
    "ClaimProofError",
    "InvalidPosition",
    "UnsupportedClaimType",
    "InvalidClaimValue",
    "ArtifactLoadError",
    "ProofGenerationFailure",
    "ProofFormatError",
]
