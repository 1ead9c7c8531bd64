"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y User-Agent para el endpoint de secretos y
  la API de Flex.
- Facilita testeo: se puede inyectar un `transport` (p.ej. `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Cliente async con los headers y el timeout de `settings`.

    `extra_headers` se añade encima de los headers base (p.ej. autenticación
    de Flex); `transport` permite servir las respuestas desde un test.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def flex_auth_headers(token: str) -> dict[str, str]:
    """Headers de autenticación que espera la API de Flex."""

    return {
        "X-Auth-Token": token,
        "apikey": token,
    }
