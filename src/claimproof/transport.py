"""Proof transport: lossless JSON text for moving proofs across a message boundary.

Field order is fixed and separators are compact, so a string produced by
``serialize_proof`` survives a deserialize/serialize cycle unchanged.
"""
from __future__ import annotations

import json
from typing import Any, Union

from .codec import NativeProof, ProofBytes
from .errors import ProofFormatError

_SEPARATORS = (",", ":")


def _loads(text: Union[str, bytes]) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ProofFormatError(f"proof payload is not valid JSON: {exc}") from exc


def serialize_proof(proof: Union[NativeProof, dict[str, Any]]) -> str:
    """Serialize a snarkjs proof for transmission."""
    if not isinstance(proof, NativeProof):
        proof = NativeProof.from_dict(proof)
    return json.dumps(proof.to_dict(), separators=_SEPARATORS)


def deserialize_proof(text: Union[str, bytes]) -> NativeProof:
    """Inverse of :func:`serialize_proof`."""
    return NativeProof.from_dict(_loads(text))


def serialize_proof_bytes(proof: ProofBytes) -> str:
    """Serialize the on-chain proof layout as hex fields."""
    return json.dumps(proof.to_dict(), separators=_SEPARATORS)


def deserialize_proof_bytes(text: Union[str, bytes]) -> ProofBytes:
    data = _loads(text)
    if not isinstance(data, dict):
        raise ProofFormatError("proof bytes payload must be a JSON object")
    return ProofBytes.from_dict(data)


__all__ = [
    "serialize_proof",
    "deserialize_proof",
    "serialize_proof_bytes",
    "deserialize_proof_bytes",
]
