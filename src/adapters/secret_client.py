"""Cliente del endpoint de secretos (token de Flex).

Implementación:
- POST `{"secretName": <nombre>}` al endpoint configurado.
- Acepta `{"token": "..."}` o `{"<nombre>": "..."}` como respuesta.

Notas:
- Cualquier fallo (red, HTTP no-2xx, JSON inválido, campo ausente) se
  convierte en `AuthResolutionError`; la caché decide qué hacer con él.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import AuthResolutionError

logger = logging.getLogger(__name__)


def extract_token(payload: Any, secret_name: str) -> str | None:
    if not isinstance(payload, dict):
        return None
    for key in ("token", secret_name):
        value = payload.get(key)
        if isinstance(value, dict):
            value = value.get("data")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class SecretEndpointClient:
    """Resuelve el token de Flex contra el endpoint de secretos del backend."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def fetch_token(self) -> str:
        url = self._settings.secret_endpoint_url
        if not url:
            raise AuthResolutionError("Secret endpoint is not configured (FLEXLINK_SECRET_ENDPOINT_URL)")

        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._settings.secret_api_key:
            headers["Authorization"] = f"Bearer {self._settings.secret_api_key}"
            headers["apikey"] = self._settings.secret_api_key

        secret_name = self._settings.secret_name
        try:
            async with build_async_client(
                self._settings, extra_headers=headers, transport=self._transport
            ) as client:
                resp = await client.post(url, json={"secretName": secret_name})
        except httpx.HTTPError as exc:
            raise AuthResolutionError(f"Secret endpoint unreachable: {exc}") from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            raise AuthResolutionError(f"Secret endpoint returned HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise AuthResolutionError("Secret endpoint returned an unparseable body") from exc

        token = extract_token(payload, secret_name)
        if token is None:
            raise AuthResolutionError(f"Flex auth token response missing {secret_name}")

        logger.debug("Resolved Flex auth token (%d chars)", len(token))
        return token
