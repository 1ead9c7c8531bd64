"""Construcción de deep-links de Flex.

Plantillas (una por intent):
- simple-element:   <base>#element/<id>/view/simple-element/header
- fin-doc:          <base>#fin-doc/<id>/doc-view/<vista fin-doc>/header
- expense-sheet:    <base>#fin-doc/<id>/doc-view/<vista hoja de gastos>/header
- contact-list:     <base>#contact-list/<id>/view/<vista crew call>/header
- equipment-list:   <base>#element/<id>/view/equipment-list/header
- remote-file-list: <base>#element/<id>/view/remote-file-list/header

El id siempre se codifica como segmento de ruta (percent-encoding).
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from core.config import DEFAULT_UI_BASE_URL
from core.domain.intents import SchemaIntent
from core.domain.models import require_element_id

logger = logging.getLogger(__name__)


class FlexViewIds:
    """Ids de vista por defecto de Flex."""

    FINANCIAL_DOCUMENT = "ca6b072c-b122-11df-b8d5-00e08175e43e"
    EXPENSE_SHEET = "566d32e0-1a1e-11e0-a472-00e08175e43e"
    CREW_CALL = "139e2f60-8d20-11e2-b07f-00e08175e43e"


# intent -> (familia de ruta, segmento de vista, vista por defecto)
_TEMPLATES: dict[SchemaIntent, tuple[str, str, str]] = {
    SchemaIntent.SIMPLE_ELEMENT: ("element", "view", "simple-element"),
    SchemaIntent.FIN_DOC: ("fin-doc", "doc-view", FlexViewIds.FINANCIAL_DOCUMENT),
    SchemaIntent.EXPENSE_SHEET: ("fin-doc", "doc-view", FlexViewIds.EXPENSE_SHEET),
    SchemaIntent.CONTACT_LIST: ("contact-list", "view", FlexViewIds.CREW_CALL),
    SchemaIntent.EQUIPMENT_LIST: ("element", "view", "equipment-list"),
    SchemaIntent.REMOTE_FILE_LIST: ("element", "view", "remote-file-list"),
}


def normalize_base_url(base_url: str | None) -> str:
    """Quita espacios y `/` o `#` finales; vacío -> base por defecto."""

    if not isinstance(base_url, str):
        return DEFAULT_UI_BASE_URL
    cleaned = base_url.strip().rstrip("/#")
    return cleaned or DEFAULT_UI_BASE_URL


def default_view_id(intent: SchemaIntent | str) -> str:
    return _TEMPLATES[SchemaIntent(intent)][2]


def build_url(
    intent: SchemaIntent | str,
    element_id: str,
    view_id_override: str | None = None,
    *,
    base_url: str | None = DEFAULT_UI_BASE_URL,
) -> str:
    """Construye el deep-link de `element_id` para `intent`.

    Lanza `InvalidElementIdError` si el id está vacío o solo tiene espacios,
    y `ValueError` si el intent no es uno de los seis conocidos.
    """

    element_id = require_element_id(element_id)
    intent = SchemaIntent(intent)
    family, view_segment, _ = _TEMPLATES[intent]
    if isinstance(view_id_override, str) and view_id_override.strip():
        view_id = view_id_override.strip()
    else:
        view_id = default_view_id(intent)

    encoded_id = quote(element_id, safe="")
    url = f"{normalize_base_url(base_url)}#{family}/{encoded_id}/{view_segment}/{quote(view_id, safe='')}/header"
    logger.debug("Built %s URL for %s: %s", intent.value, element_id, url)
    return url


def build_fallback_url(element_id: str, *, base_url: str | None = DEFAULT_UI_BASE_URL) -> str:
    """URL determinista de respaldo (simple-element)."""

    return build_url(SchemaIntent.SIMPLE_ELEMENT, element_id, base_url=base_url)
