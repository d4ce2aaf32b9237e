"""Process exit codes for the claimproof CLI."""

EXIT_OK = 0
# Claim evaluated false, or proof rejected by the verifier.
EXIT_FALSE_CLAIM = 1
EXIT_PROOF_INVALID = 1
EXIT_MALFORMED = 2
EXIT_ARTIFACT = 3
EXIT_PROVER_FAILED = 4
EXIT_VERIFIER_FAILED = 5
