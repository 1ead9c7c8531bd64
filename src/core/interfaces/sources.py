"""Contratos de las fuentes remotas del motor de enlaces.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite que el cliente del endpoint de secretos y el lookup de Flex sean
  intercambiables y testeables sin acoplar el Core a httpx.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import SchemaMetadata


@runtime_checkable
class TokenSource(Protocol):
    """Obtiene el token de autenticación de Flex."""

    async def fetch_token(self) -> str:
        """Devuelve un token no vacío o lanza `AuthResolutionError`."""

        ...


@runtime_checkable
class MetadataSource(Protocol):
    """Consulta los campos de clasificación de un elemento."""

    async def fetch_metadata(self, element_id: str, token: str) -> SchemaMetadata | None:
        """Devuelve la metadata decodificada o `None` si la consulta falló.

        Los fallos remotos se reportan como `None` o `MetadataFetchError`;
        el resolver sigue con sus pistas locales en ambos casos.
        """

        ...
