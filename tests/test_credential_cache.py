"""
Tests for the Flex token cache
==============================
"""

import asyncio

import pytest

from conftest import CountingTokenSource
from core.domain.errors import AuthResolutionError
from core.services.credential_cache import CacheState, CredentialCache


class TestCredentialCache:
    @pytest.mark.asyncio
    async def test_token_is_fetched_once(self):
        source = CountingTokenSource("tok")
        cache = CredentialCache(source)
        assert cache.state == CacheState.EMPTY

        assert await cache.get_token() == "tok"
        assert await cache.get_token() == "tok"
        assert source.calls == 1
        assert cache.state == CacheState.READY

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self):
        source = CountingTokenSource("tok", delay=0.01)
        cache = CredentialCache(source)

        tokens = await asyncio.gather(*(cache.get_token() for _ in range(10)))

        assert tokens == ["tok"] * 10
        assert source.calls == 1
        assert cache.fetch_count == 1

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_the_others(self):
        source = CountingTokenSource("tok", delay=0.05)
        cache = CredentialCache(source)

        first = asyncio.ensure_future(cache.get_token())
        second = asyncio.ensure_future(cache.get_token())
        await asyncio.sleep(0.01)
        first.cancel()

        assert await second == "tok"
        assert first.cancelled()
        assert source.calls == 1
        assert cache.state == CacheState.READY

    @pytest.mark.asyncio
    async def test_wait_for_timeout_keeps_fetch_alive(self):
        source = CountingTokenSource("tok", delay=0.05)
        cache = CredentialCache(source)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(cache.get_token(), timeout=0.01)

        assert await cache.get_token() == "tok"
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_pending_state_while_fetching(self):
        source = CountingTokenSource("tok", delay=0.01)
        cache = CredentialCache(source)

        task = asyncio.ensure_future(cache.get_token())
        await asyncio.sleep(0)
        assert cache.state == CacheState.PENDING
        assert await task == "tok"

    @pytest.mark.asyncio
    async def test_failure_is_shared_and_not_cached(self):
        source = CountingTokenSource(error=RuntimeError("endpoint down"), delay=0.01)
        cache = CredentialCache(source)

        results = await asyncio.gather(*(cache.get_token() for _ in range(3)), return_exceptions=True)

        assert all(isinstance(r, AuthResolutionError) for r in results)
        assert source.calls == 1
        assert cache.state == CacheState.EMPTY

        source.error = None
        assert await cache.get_token() == "tok-123"
        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_blank_token_is_an_auth_error(self):
        cache = CredentialCache(CountingTokenSource("   "))
        with pytest.raises(AuthResolutionError):
            await cache.get_token()
        assert cache.token is None

    @pytest.mark.asyncio
    async def test_prime_and_reset(self):
        source = CountingTokenSource("fresh")
        cache = CredentialCache(source)

        cache.prime(" primed ")
        assert await cache.get_token() == "primed"
        assert source.calls == 0

        cache.reset()
        assert cache.state == CacheState.EMPTY
        assert await cache.get_token() == "fresh"

    def test_prime_rejects_blank(self):
        cache = CredentialCache(CountingTokenSource())
        with pytest.raises(ValueError):
            cache.prime("")

    @pytest.mark.asyncio
    async def test_reset_while_pending_detaches_the_old_fetch(self):
        tokens = iter(["stale", "fresh"])

        async def fetch():
            await asyncio.sleep(0.02)
            return next(tokens)

        cache = CredentialCache(fetch)
        old_waiter = asyncio.ensure_future(cache.get_token())
        await asyncio.sleep(0)
        assert cache.state == CacheState.PENDING

        cache.reset()
        new_waiter = asyncio.ensure_future(cache.get_token())
        await asyncio.sleep(0)
        assert cache.state == CacheState.PENDING

        assert await old_waiter == "stale"
        # el fetch viejo no pisa la caché ni el fetch nuevo
        assert cache.token is None
        assert cache.state == CacheState.PENDING

        assert await new_waiter == "fresh"
        assert cache.token == "fresh"
        assert cache.fetch_count == 2
