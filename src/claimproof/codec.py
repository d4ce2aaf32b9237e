"""Groth16 proof codec: snarkjs field elements to the on-chain byte layout.

snarkjs emits every coordinate as a base-10 string and G2 coordinates as
``[real, imag]`` pairs. The on-chain verifier reads fixed-width big-endian
words and expects each G2 coordinate as ``imag || real`` (c1 || c0).

Layout produced by :func:`convert_proof`::

    a: x || y                               64 bytes
    b: x.c1 || x.c0 || y.c1 || y.c0        128 bytes
    c: x || y                               64 bytes
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Union

from .errors import ProofFormatError

WORD_SIZE = 32
G1_SIZE = 2 * WORD_SIZE
G2_SIZE = 4 * WORD_SIZE

DEFAULT_PROTOCOL = "groth16"
DEFAULT_CURVE = "bn128"

FieldLike = Union[str, int]


def decimal_to_bytes32(value: FieldLike) -> bytes:
    """Encode a base-10 field element as 32 big-endian bytes.

    Values of 2**256 or more keep only their low 256 bits and negative values
    wrap modulo 2**256. Callers are expected to pass reduced field elements.
    """
    num = int(value)
    out = bytearray(WORD_SIZE)
    for i in range(WORD_SIZE - 1, -1, -1):
        out[i] = num & 0xFF
        num >>= 8
    return bytes(out)


def bytes32_to_decimal(word: bytes) -> str:
    if len(word) != WORD_SIZE:
        raise ProofFormatError(f"expected {WORD_SIZE} bytes, got {len(word)}")
    return str(int.from_bytes(word, "big"))


@dataclass(frozen=True)
class G1Point:
    """Affine point over the base field."""
    x: str
    y: str

    @classmethod
    def from_coords(cls, coords: Sequence[FieldLike]) -> "G1Point":
        """Build from ``[x, y]`` or the projective ``[x, y, z]`` snarkjs form."""
        if len(coords) < 2:
            raise ProofFormatError(f"G1 point needs 2 coordinates, got {len(coords)}")
        return cls(x=str(coords[0]), y=str(coords[1]))

    def to_bytes(self) -> bytes:
        return decimal_to_bytes32(self.x) + decimal_to_bytes32(self.y)


@dataclass(frozen=True)
class G2Point:
    """Affine point over the quadratic extension; each axis is (real, imag)."""
    x: tuple[str, str]
    y: tuple[str, str]

    @classmethod
    def from_coords(cls, coords: Sequence[Sequence[FieldLike]]) -> "G2Point":
        """Build from ``[[x_re, x_im], [y_re, y_im]]`` with an optional z pair."""
        if len(coords) < 2:
            raise ProofFormatError(f"G2 point needs 2 coordinates, got {len(coords)}")
        axes = []
        for axis in coords[:2]:
            if len(axis) != 2:
                raise ProofFormatError(f"G2 coordinate must be a (real, imag) pair, got {axis!r}")
            axes.append((str(axis[0]), str(axis[1])))
        return cls(x=axes[0], y=axes[1])

    def to_bytes(self) -> bytes:
        x_real, x_imag = self.x
        y_real, y_imag = self.y
        return (
            decimal_to_bytes32(x_imag)
            + decimal_to_bytes32(x_real)
            + decimal_to_bytes32(y_imag)
            + decimal_to_bytes32(y_real)
        )


def g1_to_bytes(point: Union[G1Point, Sequence[FieldLike]]) -> bytes:
    """64-byte ``x || y`` encoding of a G1 point."""
    if not isinstance(point, G1Point):
        point = G1Point.from_coords(point)
    return point.to_bytes()


def g2_to_bytes(point: Union[G2Point, Sequence[Sequence[FieldLike]]]) -> bytes:
    """128-byte encoding of a G2 point, imaginary part first on each axis."""
    if not isinstance(point, G2Point):
        point = G2Point.from_coords(point)
    return point.to_bytes()


@dataclass(frozen=True)
class NativeProof:
    """A Groth16 proof as snarkjs produces it.

    Coordinates are stored exactly as received (including the projective z
    entry) so the proof can be re-serialized without loss.
    """
    pi_a: tuple[str, ...]
    pi_b: tuple[tuple[str, str], ...]
    pi_c: tuple[str, ...]
    protocol: str = DEFAULT_PROTOCOL
    curve: str = DEFAULT_CURVE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NativeProof":
        if not isinstance(data, dict):
            raise ProofFormatError(f"proof must be a JSON object, got {type(data).__name__}")
        try:
            pi_a = tuple(str(v) for v in data["pi_a"])
            pi_b = tuple((str(pair[0]), str(pair[1])) for pair in data["pi_b"])
            pi_c = tuple(str(v) for v in data["pi_c"])
        except KeyError as exc:
            raise ProofFormatError(f"proof is missing field {exc.args[0]!r}") from exc
        except (TypeError, IndexError) as exc:
            raise ProofFormatError(f"proof coordinates are malformed: {exc}") from exc
        # Fail early on short coordinate lists.
        G1Point.from_coords(pi_a)
        G2Point.from_coords(pi_b)
        G1Point.from_coords(pi_c)
        return cls(
            pi_a=pi_a,
            pi_b=pi_b,
            pi_c=pi_c,
            protocol=str(data.get("protocol", DEFAULT_PROTOCOL)),
            curve=str(data.get("curve", DEFAULT_CURVE)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pi_a": list(self.pi_a),
            "pi_b": [list(pair) for pair in self.pi_b],
            "pi_c": list(self.pi_c),
            "protocol": self.protocol,
            "curve": self.curve,
        }

    @property
    def a(self) -> G1Point:
        return G1Point.from_coords(self.pi_a)

    @property
    def b(self) -> G2Point:
        return G2Point.from_coords(self.pi_b)

    @property
    def c(self) -> G1Point:
        return G1Point.from_coords(self.pi_c)


@dataclass(frozen=True)
class ProofBytes:
    """Fixed-width Groth16 proof in the on-chain layout."""
    a: bytes
    b: bytes
    c: bytes

    def __post_init__(self) -> None:
        for name, expected in (("a", G1_SIZE), ("b", G2_SIZE), ("c", G1_SIZE)):
            actual = len(getattr(self, name))
            if actual != expected:
                raise ProofFormatError(f"proof.{name} must be {expected} bytes, got {actual}")

    def to_bytes(self) -> bytes:
        return self.a + self.b + self.c

    def to_dict(self) -> dict[str, str]:
        return {"a": self.a.hex(), "b": self.b.hex(), "c": self.c.hex()}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "ProofBytes":
        try:
            a, b, c = (bytes.fromhex(data[name]) for name in ("a", "b", "c"))
        except KeyError as exc:
            raise ProofFormatError(f"proof bytes missing field {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            raise ProofFormatError(f"proof bytes are not valid hex: {exc}") from exc
        return cls(a=a, b=b, c=c)


def convert_proof(native: Union[NativeProof, dict[str, Any]]) -> ProofBytes:
    """Convert a snarkjs proof to the on-chain :class:`ProofBytes` layout."""
    if not isinstance(native, NativeProof):
        native = NativeProof.from_dict(native)
    return ProofBytes(
        a=g1_to_bytes(native.a),
        b=g2_to_bytes(native.b),
        c=g1_to_bytes(native.c),
    )


def encode_public_signals(signals: Iterable[FieldLike]) -> list[bytes]:
    """Encode public inputs as 32-byte words, in order."""
    return [decimal_to_bytes32(s) for s in signals]


__all__ = [
    "WORD_SIZE",
    "G1_SIZE",
    "G2_SIZE",
    "G1Point",
    "G2Point",
    "NativeProof",
    "ProofBytes",
    "decimal_to_bytes32",
    "bytes32_to_decimal",
    "g1_to_bytes",
    "g2_to_bytes",
    "convert_proof",
    "encode_public_signals",
]
