"""Contratos de navegación del navegador.

Por qué separar puertos:
- Clasificar y construir URLs es puro e independiente de la plataforma.
- Abrir pestañas depende del navegador y de sus bloqueadores de pop-ups; la
  capa de UI elige e inyecta la implementación.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Protocol, runtime_checkable

from core.domain.models import ElementReference, ResolutionContext

ErrorCallback = Callable[[Exception], None]
WarningCallback = Callable[[str], None]


class NavigationOutcome(str, Enum):
    """Estados terminales de una navegación."""

    REJECTED = "rejected"
    BLOCKED = "blocked"
    REDIRECTED = "redirected"
    FALLBACK_REDIRECTED = "fallback-redirected"
    CLOSED_WITH_ERROR = "closed-with-error"
    CLICKED = "clicked"
    FALLBACK_CLICKED = "fallback-clicked"
    HARD_ERROR = "hard-error"

    @property
    def succeeded(self) -> bool:
        return self in (
            NavigationOutcome.REDIRECTED,
            NavigationOutcome.FALLBACK_REDIRECTED,
            NavigationOutcome.CLICKED,
            NavigationOutcome.FALLBACK_CLICKED,
        )


@runtime_checkable
class PlaceholderTab(Protocol):
    """Pestaña abierta en blanco, propiedad exclusiva de una navegación."""

    def set_location(self, url: str) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class Anchor(Protocol):
    """Elemento `<a>` temporal usado para abrir una pestaña sin `window.open`."""

    href: str
    target: str
    rel: str

    def click(self) -> None: ...

    def remove(self) -> None: ...


@runtime_checkable
class BrowserWindow(Protocol):
    """Operaciones mínimas del navegador que necesitan los navegadores."""

    def open_blank_tab(self) -> PlaceholderTab | None:
        """Abre `about:blank` en una pestaña nueva; `None` si se bloqueó."""

        ...

    def create_anchor(self) -> Anchor: ...


@runtime_checkable
class NavigationPort(Protocol):
    """Estrategia de navegación que elige la capa de UI."""

    def navigate(
        self,
        ref: ElementReference | str | None,
        context: ResolutionContext | None = None,
        *,
        on_error: ErrorCallback | None = None,
        on_warning: WarningCallback | None = None,
    ) -> object:
        """Devuelve un `NavigationOutcome` (o un awaitable que lo produce)."""

        ...
