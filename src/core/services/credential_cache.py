"""Single-slot cache for the Flex auth token.

The cache is an explicit object owned by whoever builds the resolver, so
tests can inject their own token source and call `reset()` between cases.

State machine:
- EMPTY -> PENDING on the first `get_token()`
- PENDING -> READY when the fetch succeeds (every waiter gets the same token)
- PENDING -> EMPTY when it fails (every waiter gets the error, nothing cached)

Concurrent callers that arrive while PENDING await the same task, so N
simultaneous callers produce exactly one network call. Cancelling one of
them leaves the shared fetch running for the rest.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

from core.domain.errors import AuthResolutionError

logger = logging.getLogger(__name__)

TokenFetcher = Callable[[], Awaitable[str]]


def _consume_outcome(task: asyncio.Task[str]) -> None:
    # Every waiter may have been cancelled; mark the error as seen anyway.
    if not task.cancelled():
        task.exception()


class CacheState(str, Enum):
    EMPTY = "empty"
    PENDING = "pending"
    READY = "ready"


class CredentialCache:
    def __init__(self, fetch_token: TokenFetcher) -> None:
        self._fetch_token = fetch_token
        self._token: str | None = None
        self._pending: asyncio.Task[str] | None = None
        self.fetch_count = 0

    @property
    def state(self) -> CacheState:
        if self._token is not None:
            return CacheState.READY
        if self._pending is not None:
            return CacheState.PENDING
        return CacheState.EMPTY

    @property
    def token(self) -> str | None:
        return self._token

    async def get_token(self) -> str:
        if self._token is not None:
            return self._token

        if self._pending is None:
            self._pending = asyncio.get_running_loop().create_task(self._load())
            self._pending.add_done_callback(_consume_outcome)

        # A cancelled waiter must not cancel the fetch the others are awaiting.
        return await asyncio.shield(self._pending)

    async def _load(self) -> str:
        task = asyncio.current_task()
        self.fetch_count += 1
        logger.debug("Fetching Flex auth token (attempt %d)", self.fetch_count)
        try:
            token = await self._fetch_token()
            if not isinstance(token, str) or not token.strip():
                raise AuthResolutionError("Flex auth token response was empty")
        except AuthResolutionError:
            logger.warning("Flex auth token could not be resolved; cache left empty")
            raise
        except Exception as exc:
            logger.warning("Flex auth token fetch failed: %s", exc)
            raise AuthResolutionError(str(exc) or "Failed to resolve Flex auth token") from exc
        finally:
            current = self._pending is task
            if current:
                self._pending = None

        token = token.strip()
        if current:
            self._token = token
        else:
            logger.debug("Discarding Flex auth token fetched before reset()")
        return token

    def prime(self, token: str) -> None:
        """Store a token obtained elsewhere (moves the cache to READY)."""

        if not isinstance(token, str) or not token.strip():
            raise ValueError("token must be a non-empty string")
        self._token = token.strip()

    def reset(self) -> None:
        """Forget the cached token and any pending fetch.

        A fetch already in flight still answers its own waiters, but its
        result is not stored and it no longer counts as pending.
        """

        self._token = None
        self._pending = None
