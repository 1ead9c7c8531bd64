"""
Tests for Flex deep-link construction
=====================================
"""

import pytest

from core.config import DEFAULT_UI_BASE_URL
from core.domain.errors import InvalidElementIdError
from core.domain.intents import SchemaIntent
from core.services.url_builder import (
    FlexViewIds,
    build_fallback_url,
    build_url,
    default_view_id,
    normalize_base_url,
)

BASE = "https://flex.example.test/f5/ui/?desktop"


class TestTemplates:
    def test_simple_element(self):
        assert build_url(SchemaIntent.SIMPLE_ELEMENT, "abc", base_url=BASE) == (
            f"{BASE}#element/abc/view/simple-element/header"
        )

    def test_fin_doc(self):
        assert build_url("fin-doc", "abc", base_url=BASE) == (
            f"{BASE}#fin-doc/abc/doc-view/{FlexViewIds.FINANCIAL_DOCUMENT}/header"
        )

    def test_expense_sheet(self):
        assert build_url(SchemaIntent.EXPENSE_SHEET, "abc", base_url=BASE) == (
            f"{BASE}#fin-doc/abc/doc-view/{FlexViewIds.EXPENSE_SHEET}/header"
        )

    def test_contact_list(self):
        assert build_url(SchemaIntent.CONTACT_LIST, "abc", base_url=BASE) == (
            f"{BASE}#contact-list/abc/view/{FlexViewIds.CREW_CALL}/header"
        )

    def test_equipment_and_remote_files(self):
        assert build_url(SchemaIntent.EQUIPMENT_LIST, "abc", base_url=BASE).endswith(
            "#element/abc/view/equipment-list/header"
        )
        assert build_url(SchemaIntent.REMOTE_FILE_LIST, "abc", base_url=BASE).endswith(
            "#element/abc/view/remote-file-list/header"
        )

    def test_view_override(self):
        url = build_url(SchemaIntent.FIN_DOC, "abc", "custom-view", base_url=BASE)
        assert url == f"{BASE}#fin-doc/abc/doc-view/custom-view/header"

    def test_blank_override_keeps_default(self):
        url = build_url(SchemaIntent.FIN_DOC, "abc", "  ", base_url=BASE)
        assert default_view_id(SchemaIntent.FIN_DOC) in url


class TestInputHandling:
    def test_element_id_is_trimmed_and_encoded(self):
        url = build_url(SchemaIntent.SIMPLE_ELEMENT, "  a b/c#d ", base_url=BASE)
        assert "#element/a%20b%2Fc%23d/view/" in url

    @pytest.mark.parametrize("bad", ["", "   ", None])
    def test_invalid_element_id(self, bad):
        with pytest.raises(InvalidElementIdError) as exc_info:
            build_url(SchemaIntent.SIMPLE_ELEMENT, bad, base_url=BASE)
        assert "Invalid element ID" in str(exc_info.value)

    def test_unknown_intent(self):
        with pytest.raises(ValueError):
            build_url("spreadsheet", "abc", base_url=BASE)

    def test_default_base_url(self):
        assert build_fallback_url("abc").startswith(f"{DEFAULT_UI_BASE_URL}#element/abc/")


class TestNormalizeBaseUrl:
    @pytest.mark.parametrize(
        "raw",
        [BASE, f"{BASE}/", f"{BASE}#", f"  {BASE}#/  "],
    )
    def test_trailing_characters_are_removed(self, raw):
        assert normalize_base_url(raw) == BASE

    @pytest.mark.parametrize("raw", [None, "", "   ", "/#"])
    def test_empty_falls_back_to_default(self, raw):
        assert normalize_base_url(raw) == DEFAULT_UI_BASE_URL
