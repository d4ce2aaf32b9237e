"""Verification key loading and the process-wide key cache.

The key is immutable for a given contract deployment, so the first successful
fetch is kept for the life of the process. Concurrent first loads share one
in-flight fetch; a failed fetch leaves the cache empty so a later call can
try again.
"""
from __future__ import annotations

import asyncio
import json
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from .errors import ArtifactLoadError

LOGGER = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "protocol",
    "curve",
    "nPublic",
    "vk_alpha_1",
    "vk_beta_2",
    "vk_gamma_2",
    "vk_delta_2",
    "IC",
)

URL_SCHEMES = ("http", "https", "file")


@dataclass(frozen=True)
class VerificationKey:
    """Groth16 verification key as exported by ``snarkjs zkey export verificationkey``."""
    protocol: str
    curve: str
    n_public: int
    vk_alpha_1: list
    vk_beta_2: list
    vk_gamma_2: list
    vk_delta_2: list
    ic: list
    vk_alphabeta_12: list = field(default_factory=list)
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any], uri: str = "<memory>") -> "VerificationKey":
        if not isinstance(data, dict):
            raise ArtifactLoadError(uri, "verification key must be a JSON object")
        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise ArtifactLoadError(uri, f"verification key missing fields: {', '.join(missing)}")
        ic = data["IC"]
        n_public = int(data["nPublic"])
        if len(ic) != n_public + 1:
            raise ArtifactLoadError(uri, f"IC has {len(ic)} points, expected nPublic + 1 = {n_public + 1}")
        return cls(
            protocol=data["protocol"],
            curve=data["curve"],
            n_public=n_public,
            vk_alpha_1=data["vk_alpha_1"],
            vk_beta_2=data["vk_beta_2"],
            vk_gamma_2=data["vk_gamma_2"],
            vk_delta_2=data["vk_delta_2"],
            ic=ic,
            vk_alphabeta_12=data.get("vk_alphabeta_12", []),
            raw=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {
            "protocol": self.protocol,
            "curve": self.curve,
            "nPublic": self.n_public,
            "vk_alpha_1": self.vk_alpha_1,
            "vk_beta_2": self.vk_beta_2,
            "vk_gamma_2": self.vk_gamma_2,
            "vk_delta_2": self.vk_delta_2,
            "vk_alphabeta_12": self.vk_alphabeta_12,
            "IC": self.ic,
        }


def fetch_verification_key(uri: str, timeout: float = 30) -> VerificationKey:
    """Fetch and parse a verification key from a URL or a filesystem path."""
    scheme = urlparse(uri).scheme
    try:
        if scheme in URL_SCHEMES:
            req = Request(uri, headers={"Accept": "application/json"})
            with urlopen(req, timeout=timeout) as resp:
                body = resp.read()
        else:
            body = Path(uri).read_bytes()
        data = json.loads(body)
    except HTTPError as e:
        raise ArtifactLoadError(uri, f"HTTP {e.code} {e.reason}") from e
    except URLError as e:
        raise ArtifactLoadError(uri, str(e.reason)) from e
    except OSError as e:
        raise ArtifactLoadError(uri, str(e)) from e
    except ValueError as e:
        raise ArtifactLoadError(uri, f"invalid JSON: {e}") from e
    return VerificationKey.from_dict(data, uri=uri)


Loader = Callable[[str], VerificationKey]

_EXECUTOR = ThreadPoolExecutor(max_workers=2, thread_name_prefix="claimproof-vkey")


class VerificationKeyCache:
    """Memoizes one verification key: first successful fetch wins, no invalidation."""

    def __init__(self, uri: str, loader: Optional[Loader] = None, timeout: float = 30) -> None:
        self.uri = uri
        self.timeout = timeout
        self._loader = loader or (lambda u: fetch_verification_key(u, timeout=self.timeout))
        self._lock = threading.Lock()
        self._value: Optional[VerificationKey] = None
        self._inflight: Optional[Future] = None
        self._generation = 0

    @property
    def cached(self) -> Optional[VerificationKey]:
        return self._value

    def _load(self, generation: int) -> VerificationKey:
        started = time.perf_counter()
        try:
            value = self._loader(self.uri)
        except ArtifactLoadError:
            self._finish(generation, None)
            raise
        except Exception as e:
            self._finish(generation, None)
            raise ArtifactLoadError(self.uri, str(e)) from e
        self._finish(generation, value)
        LOGGER.debug("Loaded verification key from %s in %.3fs", self.uri, time.perf_counter() - started)
        return value

    def _finish(self, generation: int, value: Optional[VerificationKey]) -> None:
        # A load started before reset() must not repopulate the cache.
        with self._lock:
            if generation != self._generation:
                return
            if value is not None:
                self._value = value
            self._inflight = None

    def _pending(self) -> Future:
        # Caller holds self._lock.
        if self._inflight is None:
            self._inflight = _EXECUTOR.submit(self._load, self._generation)
        return self._inflight

    def get(self) -> VerificationKey:
        """Blocking load."""
        with self._lock:
            if self._value is not None:
                return self._value
            pending = self._pending()
        return pending.result()

    async def aget(self) -> VerificationKey:
        """Load without blocking the event loop.

        Cancelling the caller does not cancel a fetch other callers share.
        """
        with self._lock:
            if self._value is not None:
                return self._value
            pending = self._pending()
        return await asyncio.shield(asyncio.wrap_future(pending))

    def reset(self) -> None:
        """Forget the cached key. Test use only."""
        with self._lock:
            self._generation += 1
            self._value = None
            self._inflight = None


_CACHES: dict[str, VerificationKeyCache] = {}
_CACHES_LOCK = threading.Lock()


def shared_cache(uri: str, loader: Optional[Loader] = None, timeout: float = 30) -> VerificationKeyCache:
    """Process-wide cache for ``uri``, created on first use."""
    with _CACHES_LOCK:
        cache = _CACHES.get(uri)
        if cache is None:
            cache = _CACHES[uri] = VerificationKeyCache(uri, loader=loader, timeout=timeout)
        return cache


def reset_shared_caches() -> None:
    """Drop every process-wide cache. Test use only."""
    with _CACHES_LOCK:
        _CACHES.clear()


__all__ = [
    "VerificationKey",
    "VerificationKeyCache",
    "fetch_verification_key",
    "shared_cache",
    "reset_shared_caches",
]
