"""Tests for verification key loading and caching."""
from __future__ import annotations

import asyncio
import threading

import pytest

from claimproof.errors import ArtifactLoadError
from claimproof.vkey import (
    VerificationKey,
    VerificationKeyCache,
    fetch_verification_key,
    reset_shared_caches,
    shared_cache,
)


class TestFetch:
    def test_fetch_from_path(self, vkey_path):
        vkey = fetch_verification_key(str(vkey_path))
        assert vkey.protocol == "groth16"
        assert vkey.curve == "bn128"
        assert vkey.n_public == 3
        assert len(vkey.ic) == 4

    def test_fetch_from_file_url(self, vkey_path):
        vkey = fetch_verification_key(vkey_path.resolve().as_uri())
        assert vkey.n_public == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(ArtifactLoadError) as exc:
            fetch_verification_key(str(tmp_path / "nope.json"))
        assert exc.value.uri.endswith("nope.json")

    def test_invalid_json(self, tmp_path):
        bad = tmp_path / "vk.json"
        bad.write_text("{oops")
        with pytest.raises(ArtifactLoadError, match="invalid JSON"):
            fetch_verification_key(str(bad))

    def test_missing_fields(self, vkey_dict):
        del vkey_dict["IC"]
        with pytest.raises(ArtifactLoadError, match="IC"):
            VerificationKey.from_dict(vkey_dict)

    def test_ic_length_must_match_public_inputs(self, vkey_dict):
        vkey_dict["nPublic"] = 5
        with pytest.raises(ArtifactLoadError, match="nPublic"):
            VerificationKey.from_dict(vkey_dict)

    def test_to_dict_returns_document(self, vkey_dict):
        assert VerificationKey.from_dict(vkey_dict).to_dict() == vkey_dict


class TestCache:
    def test_fetches_once(self, counting_cache):
        cache, calls = counting_cache
        first = cache.get()
        second = cache.get()
        assert first is second
        assert calls["count"] == 1

    def test_async_fetches_once(self, counting_cache):
        cache, calls = counting_cache

        async def run():
            return [await cache.aget() for _ in range(3)]

        keys = asyncio.run(run())
        assert all(k is keys[0] for k in keys)
        assert calls["count"] == 1

    def test_concurrent_loads_collapse(self, vkey_dict):
        gate = threading.Event()
        calls = {"count": 0}

        def slow_loader(uri):
            calls["count"] += 1
            gate.wait(timeout=5)
            return VerificationKey.from_dict(vkey_dict, uri=uri)

        cache = VerificationKeyCache("mem://vk", loader=slow_loader)

        async def run():
            tasks = [asyncio.create_task(cache.aget()) for _ in range(5)]
            await asyncio.sleep(0.05)
            gate.set()
            return await asyncio.gather(*tasks)

        keys = asyncio.run(run())
        assert calls["count"] == 1
        assert all(k is keys[0] for k in keys)

    def test_failure_is_not_cached(self, vkey_dict):
        attempts = {"count": 0}

        def flaky(uri):
            attempts["count"] += 1
            if attempts["count"] == 1:
                raise ArtifactLoadError(uri, "HTTP 503 Service Unavailable")
            return VerificationKey.from_dict(vkey_dict, uri=uri)

        cache = VerificationKeyCache("mem://vk", loader=flaky)
        with pytest.raises(ArtifactLoadError, match="503"):
            cache.get()
        assert cache.cached is None
        assert cache.get().n_public == 3
        assert attempts["count"] == 2

    def test_unexpected_loader_error_becomes_artifact_error(self):
        def broken(uri):
            raise RuntimeError("socket closed")

        cache = VerificationKeyCache("mem://vk", loader=broken)
        with pytest.raises(ArtifactLoadError, match="socket closed"):
            cache.get()

    def test_reset(self, counting_cache):
        cache, calls = counting_cache
        cache.get()
        cache.reset()
        assert cache.cached is None
        cache.get()
        assert calls["count"] == 2

    def test_reset_discards_load_in_progress(self, vkey_dict):
        started = threading.Event()
        release = threading.Event()

        def slow_loader(uri):
            started.set()
            release.wait(timeout=5)
            return VerificationKey.from_dict(vkey_dict, uri=uri)

        cache = VerificationKeyCache("mem://vk", loader=slow_loader)
        worker = threading.Thread(target=cache.get)
        worker.start()
        assert started.wait(timeout=5)
        cache.reset()
        release.set()
        worker.join(timeout=5)
        assert cache.cached is None


class TestSharedCache:
    def test_same_uri_same_cache(self):
        assert shared_cache("a.json") is shared_cache("a.json")
        assert shared_cache("a.json") is not shared_cache("b.json")

    def test_reset_shared(self):
        first = shared_cache("a.json")
        reset_shared_caches()
        assert shared_cache("a.json") is not first
