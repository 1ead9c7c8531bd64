"""Errores del dominio de enlaces.

Por qué una jerarquía propia:
- La CLI y los navegadores distinguen entre entrada inválida (se reporta al
  usuario) y fallos remotos (se degradan a un enlace de respaldo).
"""

from __future__ import annotations


class LinkResolutionError(Exception):
    """Base de todos los errores del motor de enlaces."""


class InvalidElementIdError(LinkResolutionError, ValueError):
    """El `element_id` está vacío, no es texto o solo tiene espacios."""

    def __init__(self, element_id: object) -> None:
        self.element_id = element_id
        super().__init__(
            f'Invalid element ID: "{element_id}". '
            "Cannot build a Flex link without a valid element identifier."
        )


class AuthResolutionError(LinkResolutionError):
    """No se pudo obtener el token de Flex desde el endpoint de secretos."""


class MetadataFetchError(LinkResolutionError):
    """La consulta de metadata del elemento falló (HTTP, red o JSON)."""


class UnresolvableIntentError(LinkResolutionError):
    """Ninguna pista (local o remota) determina el esquema del elemento."""

    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        super().__init__(f"Unable to resolve Flex URL schema for element {element_id}")


class NavigationError(LinkResolutionError):
    """El navegador no pudo abrir o redirigir la pestaña."""


class PopupBlockedError(NavigationError):
    """No se obtuvo una pestaña placeholder (bloqueador de pop-ups)."""
