"""Navegador del sistema (módulo `webbrowser`) para la CLI.

Por qué un adaptador:
- Los navegadores (`core.services.navigation`) hablan con un `BrowserWindow`
  abstracto; aquí vive la implementación de escritorio.

Nota:
- `webbrowser` no puede abrir una pestaña en blanco y redirigirla después.
  La pestaña placeholder es perezosa: la pestaña real se abre cuando se fija
  su location, y cerrarla antes no abre nada.
"""

from __future__ import annotations

import logging
import webbrowser

from core.domain.errors import NavigationError

logger = logging.getLogger(__name__)


def _open_new_tab(url: str) -> None:
    if not webbrowser.open_new_tab(url):
        raise NavigationError(f"No browser could open {url}")


class SystemPlaceholderTab:
    def __init__(self) -> None:
        self.location: str | None = None
        self.closed = False

    def set_location(self, url: str) -> None:
        if self.closed:
            raise NavigationError("Placeholder tab is already closed")
        if self.location is not None:
            raise NavigationError("Placeholder tab was already redirected")
        _open_new_tab(url)
        self.location = url

    def close(self) -> None:
        self.closed = True


class SystemAnchor:
    def __init__(self) -> None:
        self.href = ""
        self.target = ""
        self.rel = ""
        self.removed = False

    def click(self) -> None:
        if not self.href:
            raise NavigationError("Anchor has no href")
        _open_new_tab(self.href)

    def remove(self) -> None:
        self.removed = True


class SystemBrowser:
    """`BrowserWindow` respaldado por el navegador por defecto del sistema."""

    def open_blank_tab(self) -> SystemPlaceholderTab | None:
        try:
            webbrowser.get()
        except webbrowser.Error as exc:
            logger.warning("No system browser available: %s", exc)
            return None
        return SystemPlaceholderTab()

    def create_anchor(self) -> SystemAnchor:
        return SystemAnchor()
