"""
flexlink Test Fixtures
======================

Shared fixtures: settings isolated from any .env, fake browser objects and
in-memory token/metadata sources.
"""

from __future__ import annotations

import asyncio

import pytest

from core.config import AppSettings
from core.domain.errors import AuthResolutionError, MetadataFetchError
from core.domain.models import SchemaMetadata
from core.services.credential_cache import CredentialCache
from core.services.link_resolver import LinkResolver

BASE_URL = "https://flex.example.test/f5/ui/?desktop"


# ============================================
# CONFIG
# ============================================

@pytest.fixture
def settings():
    """Settings that never read the developer's .env files."""
    return AppSettings(
        _env_file=None,
        ui_base_url=BASE_URL,
        api_base_url="https://flex.example.test/f5/api",
        secret_endpoint_url="https://backend.example.test/functions/v1/get-secret",
        secret_name="X_AUTH_TOKEN",
        secret_api_key="anon-key",
        http_timeout_seconds=5.0,
    )


# ============================================
# TOKEN / METADATA SOURCES
# ============================================

class CountingTokenSource:
    """Async token source that counts calls and can be told to fail."""

    def __init__(self, token: str = "tok-123", *, error: Exception | None = None, delay: float = 0.0):
        self.token = token
        self.error = error
        self.delay = delay
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.token


class StubMetadataSource:
    """In-memory `MetadataSource` keyed by element id."""

    def __init__(self, records: dict[str, SchemaMetadata] | None = None, *, error: Exception | None = None):
        self.records = records or {}
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def fetch_metadata(self, element_id: str, token: str) -> SchemaMetadata | None:
        self.calls.append((element_id, token))
        if self.error is not None:
            raise self.error
        return self.records.get(element_id)


@pytest.fixture
def token_source():
    return CountingTokenSource()


@pytest.fixture
def metadata_source():
    return StubMetadataSource()


@pytest.fixture
def resolver(token_source, metadata_source):
    return LinkResolver(
        credentials=CredentialCache(token_source),
        metadata_source=metadata_source,
        base_url=BASE_URL,
    )


def failing_auth_source() -> CountingTokenSource:
    return CountingTokenSource(error=AuthResolutionError("secret endpoint down"))


def failing_metadata_source() -> StubMetadataSource:
    return StubMetadataSource(error=MetadataFetchError("boom"))


# ============================================
# BROWSER FAKES
# ============================================

class FakeTab:
    def __init__(self, *, fail_on: set[str] | None = None, fail_always: bool = False):
        self.locations: list[str] = []
        self.closed = False
        self.fail_on = fail_on or set()
        self.fail_always = fail_always

    def set_location(self, url: str) -> None:
        if self.fail_always or url in self.fail_on:
            raise RuntimeError(f"cannot navigate to {url}")
        self.locations.append(url)

    def close(self) -> None:
        self.closed = True


class FakeAnchor:
    def __init__(self, browser: "FakeBrowser"):
        self.browser = browser
        self.href = ""
        self.target = ""
        self.rel = ""
        self.removed = False

    def click(self) -> None:
        if self.browser.click_failures > 0:
            self.browser.click_failures -= 1
            raise RuntimeError("click rejected")
        self.browser.clicked.append((self.href, self.target, self.rel))

    def remove(self) -> None:
        if self.browser.remove_fails:
            raise RuntimeError("anchor already detached")
        self.removed = True


class FakeBrowser:
    def __init__(
        self,
        tab: FakeTab | None = None,
        *,
        blocked: bool = False,
        click_failures: int = 0,
        remove_fails: bool = False,
    ):
        self.tab = tab if tab is not None else FakeTab()
        self.blocked = blocked
        self.click_failures = click_failures
        self.remove_fails = remove_fails
        self.opened_tabs = 0
        self.anchors: list[FakeAnchor] = []
        self.clicked: list[tuple[str, str, str]] = []

    def open_blank_tab(self) -> FakeTab | None:
        self.opened_tabs += 1
        if self.blocked:
            return None
        return self.tab

    def create_anchor(self) -> FakeAnchor:
        anchor = FakeAnchor(self)
        self.anchors.append(anchor)
        return anchor


@pytest.fixture
def browser():
    return FakeBrowser()
