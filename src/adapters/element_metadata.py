"""Lookup de metadata de elementos en la API de Flex.

Objetivo:
- Cuando las pistas locales no bastan, preguntar a Flex por los campos de
  clasificación del elemento (`/element/<id>/key-info/`).

Formato de respuesta:
- Cada campo puede venir envuelto (`{"data": valor}`) o suelto (`valor`), y
  según la versión con nombres distintos. `METADATA_FIELDS` documenta cada
  campo esperado y sus alias.
- El decoder nunca lanza: un campo que no se puede leer queda en `None` y se
  anota en `missing_fields`.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from adapters.http_client import build_async_client, flex_auth_headers
from core.config import AppSettings
from core.domain.models import SchemaMetadata

logger = logging.getLogger(__name__)

# campo del modelo -> claves aceptadas en el JSON, por prioridad
METADATA_FIELDS: dict[str, tuple[str, ...]] = {
    "domain_id": ("domainId", "domainID"),
    "definition_id": ("elementDefinitionId", "definitionId"),
    "view_hint": ("viewHint", "view_hint"),
    "schema_id": ("schemaId",),
    "document_number": ("documentNumber", "document_number"),
    "display_name": ("displayName", "name", "documentName"),
}


def decode_field(value: Any) -> str | None:
    """Lee un campo envuelto o suelto. Devuelve `None` si no es texto útil."""

    if isinstance(value, dict):
        value = value.get("data")
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def decode_metadata(payload: Any) -> SchemaMetadata:
    """Decodifica la respuesta de key-info sin lanzar nunca."""

    if not isinstance(payload, dict):
        return SchemaMetadata(missing_fields=tuple(METADATA_FIELDS))

    values: dict[str, str] = {}
    missing: list[str] = []
    for field_name, keys in METADATA_FIELDS.items():
        decoded = None
        for key in keys:
            decoded = decode_field(payload.get(key))
            if decoded is not None:
                break
        if decoded is None:
            missing.append(field_name)
        else:
            values[field_name] = decoded

    return SchemaMetadata(**values, missing_fields=tuple(missing))


class ElementMetadataClient:
    """Cliente del endpoint de metadata de elementos de Flex."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self.request_count = 0

    def element_url(self, element_id: str) -> str:
        base = self._settings.api_base_url.rstrip("/")
        return f"{base}/element/{quote(element_id, safe='')}/key-info/"

    async def fetch_metadata(self, element_id: str, token: str) -> SchemaMetadata | None:
        url = self.element_url(element_id)
        self.request_count += 1
        try:
            async with build_async_client(
                self._settings,
                extra_headers=flex_auth_headers(token),
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("Element metadata request failed for %s: %s", element_id, exc)
            return None

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.warning(
                "Failed to fetch element metadata for %s: HTTP %s %s",
                element_id,
                resp.status_code,
                resp.reason_phrase,
            )
            return None

        try:
            payload = resp.json()
        except ValueError:
            logger.warning("Element metadata for %s is not valid JSON", element_id)
            return None

        metadata = decode_metadata(payload)
        logger.debug(
            "Retrieved element metadata for %s: domain=%s definition=%s view=%s schema=%s",
            element_id,
            metadata.domain_id,
            metadata.definition_id,
            metadata.view_hint,
            metadata.schema_id,
        )
        return metadata
