"""
Tests for local adapters
========================

System browser, JSON export and the HTTP client builder.
"""

import json
import webbrowser

import pytest

from adapters import browser as browser_module
from adapters.browser import SystemAnchor, SystemBrowser, SystemPlaceholderTab
from adapters.http_client import build_async_client, flex_auth_headers
from adapters.json_exporter import export_resolutions_json, resolution_to_dict
from core.domain.errors import NavigationError
from core.domain.intents import MatchReason, SchemaIntent
from core.services.link_resolver import LinkResolution


@pytest.fixture
def opened(monkeypatch):
    urls = []

    def fake_open(url):
        urls.append(url)
        return True

    monkeypatch.setattr(browser_module.webbrowser, "open_new_tab", fake_open)
    return urls


class TestSystemBrowser:
    def test_placeholder_opens_on_first_location(self, opened):
        tab = SystemPlaceholderTab()
        assert opened == []
        tab.set_location("https://flex/x")
        assert opened == ["https://flex/x"]
        with pytest.raises(NavigationError):
            tab.set_location("https://flex/y")

    def test_closed_placeholder_never_opens(self, opened):
        tab = SystemPlaceholderTab()
        tab.close()
        with pytest.raises(NavigationError):
            tab.set_location("https://flex/x")
        assert opened == []

    def test_anchor_click(self, opened):
        anchor = SystemAnchor()
        with pytest.raises(NavigationError):
            anchor.click()
        anchor.href = "https://flex/a"
        anchor.click()
        assert opened == ["https://flex/a"]

    def test_open_failure(self, monkeypatch):
        monkeypatch.setattr(browser_module.webbrowser, "open_new_tab", lambda url: False)
        with pytest.raises(NavigationError):
            SystemPlaceholderTab().set_location("https://flex/x")

    def test_no_browser_available(self, monkeypatch):
        def no_browser(*args, **kwargs):
            raise webbrowser.Error("could not locate runnable browser")

        monkeypatch.setattr(browser_module.webbrowser, "get", no_browser)
        assert SystemBrowser().open_blank_tab() is None

    def test_browser_available(self, monkeypatch):
        monkeypatch.setattr(browser_module.webbrowser, "get", lambda *args, **kwargs: object())
        assert isinstance(SystemBrowser().open_blank_tab(), SystemPlaceholderTab)
        assert isinstance(SystemBrowser().create_anchor(), SystemAnchor)


class TestJsonExporter:
    def test_export(self, tmp_path):
        resolutions = [
            LinkResolution("a", SchemaIntent.FIN_DOC, MatchReason.DEFINITION_ID, "https://flex#fin-doc/a"),
            LinkResolution("b", None, MatchReason.UNRESOLVED, None, True),
        ]
        path = export_resolutions_json(resolutions=resolutions, output_path=tmp_path / "out" / "links.json")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0] == resolution_to_dict(resolutions[0])
        assert data[1] == {
            "element_id": "b",
            "intent": None,
            "reason": "unresolved",
            "url": None,
            "used_network": True,
        }


class TestHttpClient:
    def test_defaults(self, settings):
        client = build_async_client(settings, extra_headers=flex_auth_headers("tok"))
        assert client.headers["User-Agent"] == settings.user_agent
        assert client.headers["Accept"] == "application/json"
        assert client.headers["X-Auth-Token"] == "tok"
        assert client.timeout.read == settings.http_timeout_seconds


class TestPorts:
    def test_adapters_satisfy_core_protocols(self, settings, resolver):
        from adapters.element_metadata import ElementMetadataClient
        from adapters.secret_client import SecretEndpointClient
        from core.interfaces.navigation import BrowserWindow, NavigationPort
        from core.interfaces.sources import MetadataSource, TokenSource
        from core.services.navigation import DeferredNavigator, ImmediateNavigator

        assert isinstance(SecretEndpointClient(settings), TokenSource)
        assert isinstance(ElementMetadataClient(settings), MetadataSource)
        assert isinstance(SystemBrowser(), BrowserWindow)
        assert isinstance(DeferredNavigator(resolver, SystemBrowser()), NavigationPort)
        assert isinstance(ImmediateNavigator(resolver, SystemBrowser()), NavigationPort)
