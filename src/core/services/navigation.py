"""Browser navigation strategies.

Browsers only let a page open a new tab in direct response to a user gesture.
Two strategies cope with that:

- `DeferredNavigator` opens a blank placeholder tab synchronously (while the
  gesture is still valid), resolves the real URL asynchronously (token fetch +
  type detection) and then redirects the placeholder. The placeholder belongs
  to that single call: it is redirected or closed exactly once.
- `ImmediateNavigator` is for callers that already hold enough context to
  resolve without the network. It builds the URL synchronously and clicks a
  temporary `target="_blank"` anchor, which avoids the blocker heuristics tied
  to a delayed `window.open`.

Both report through `on_error(Exception)` / `on_warning(str)` and return the
terminal `NavigationOutcome`.
"""

from __future__ import annotations

import logging

from core.config import DEFAULT_UI_BASE_URL
from core.domain.errors import InvalidElementIdError, NavigationError, PopupBlockedError
from core.domain.models import ElementReference, ResolutionContext, require_element_id
from core.interfaces.navigation import (
    BrowserWindow,
    ErrorCallback,
    NavigationOutcome,
    PlaceholderTab,
    WarningCallback,
)
from core.services.link_resolver import LinkResolver
from core.services.url_builder import build_fallback_url

logger = logging.getLogger(__name__)

WARNING_RESOLVER_FAILED = "Opened with fallback URL format (resolver failed)"
WARNING_ERROR_OCCURRED = "Opened with fallback URL format (error occurred)"


def _emit_error(callback: ErrorCallback | None, error: Exception) -> None:
    if callback is not None:
        callback(error)


def _emit_warning(callback: WarningCallback | None, message: str) -> None:
    logger.warning("%s", message)
    if callback is not None:
        callback(message)


def _validate(
    ref: ElementReference | str | None,
    on_error: ErrorCallback | None,
) -> tuple[ElementReference, str] | None:
    try:
        reference = ElementReference.coerce(ref)
        return reference, require_element_id(reference)
    except InvalidElementIdError as exc:
        logger.error("Rejected navigation: %s", exc)
        _emit_error(on_error, exc)
        return None


def _label(reference: ElementReference, element_id: str) -> str:
    return reference.display_name or reference.document_number or element_id


class DeferredNavigator:
    """Placeholder-tab strategy; may hit the network while resolving."""

    def __init__(
        self,
        resolver: LinkResolver,
        browser: BrowserWindow,
        *,
        base_url: str | None = None,
    ) -> None:
        self.resolver = resolver
        self.browser = browser
        self.base_url = base_url or resolver.base_url or DEFAULT_UI_BASE_URL

    async def navigate(
        self,
        ref: ElementReference | str | None,
        context: ResolutionContext | None = None,
        *,
        on_error: ErrorCallback | None = None,
        on_warning: WarningCallback | None = None,
    ) -> NavigationOutcome:
        validated = _validate(ref, on_error)
        if validated is None:
            return NavigationOutcome.REJECTED
        reference, element_id = validated

        # Debe ocurrir antes de cualquier await para conservar el gesto.
        tab = self._open_placeholder(element_id)
        if tab is None:
            _emit_error(
                on_error,
                PopupBlockedError(
                    f"The browser blocked the new tab for {_label(reference, element_id)}; "
                    "allow pop-ups for this site and try again."
                ),
            )
            return NavigationOutcome.BLOCKED

        fallback_url = build_fallback_url(element_id, base_url=self.base_url)
        try:
            url = await self.resolver.resolve_async(reference, context)
        except Exception as exc:
            logger.error("Resolver failed for %s: %s", element_id, exc)
            return self._redirect_fallback(tab, element_id, fallback_url, exc, WARNING_ERROR_OCCURRED, on_error, on_warning)

        if not url:
            return self._redirect_fallback(
                tab,
                element_id,
                fallback_url,
                NavigationError(f"Could not resolve a Flex URL for {element_id}"),
                WARNING_RESOLVER_FAILED,
                on_error,
                on_warning,
            )

        try:
            tab.set_location(url)
        except Exception as exc:
            logger.error("Could not redirect placeholder tab for %s: %s", element_id, exc)
            return self._redirect_fallback(tab, element_id, fallback_url, exc, WARNING_ERROR_OCCURRED, on_error, on_warning)

        logger.info("Redirected placeholder tab for %s to %s", element_id, url)
        return NavigationOutcome.REDIRECTED

    def _open_placeholder(self, element_id: str) -> PlaceholderTab | None:
        try:
            return self.browser.open_blank_tab()
        except Exception as exc:
            logger.error("Opening placeholder tab for %s raised: %s", element_id, exc)
            return None

    def _redirect_fallback(
        self,
        tab: PlaceholderTab,
        element_id: str,
        fallback_url: str,
        cause: Exception,
        warning: str,
        on_error: ErrorCallback | None,
        on_warning: WarningCallback | None,
    ) -> NavigationOutcome:
        try:
            tab.set_location(fallback_url)
        except Exception as exc:
            logger.error("Fallback redirect failed for %s: %s", element_id, exc)
            try:
                tab.close()
            except Exception as close_exc:
                logger.error("Failed to close placeholder tab for %s: %s", element_id, close_exc)
            _emit_error(on_error, cause)
            return NavigationOutcome.CLOSED_WITH_ERROR

        _emit_warning(on_warning, warning)
        return NavigationOutcome.FALLBACK_REDIRECTED


class ImmediateNavigator:
    """Anchor-click strategy; never touches the network."""

    def __init__(
        self,
        resolver: LinkResolver,
        browser: BrowserWindow,
        *,
        base_url: str | None = None,
    ) -> None:
        self.resolver = resolver
        self.browser = browser
        self.base_url = base_url or resolver.base_url or DEFAULT_UI_BASE_URL

    def navigate(
        self,
        ref: ElementReference | str | None,
        context: ResolutionContext | None = None,
        *,
        on_error: ErrorCallback | None = None,
        on_warning: WarningCallback | None = None,
    ) -> NavigationOutcome:
        validated = _validate(ref, on_error)
        if validated is None:
            return NavigationOutcome.REJECTED
        reference, element_id = validated
        label = _label(reference, element_id)

        try:
            url = self.resolver.resolve(reference, context)
            if not url:
                raise NavigationError(f"Could not build a Flex URL for {label}")
            self._click_through(url)
        except Exception as exc:
            logger.error("Immediate navigation failed for %s: %s", element_id, exc)
            fallback_url = build_fallback_url(element_id, base_url=self.base_url)
            try:
                self._click_through(fallback_url)
            except Exception as fallback_exc:
                logger.error("Fallback navigation failed for %s: %s", element_id, fallback_exc)
                _emit_error(on_error, NavigationError(f"Could not open {label} in Flex: {fallback_exc}"))
                return NavigationOutcome.HARD_ERROR
            _emit_warning(on_warning, f"Opened {label} with fallback URL format")
            return NavigationOutcome.FALLBACK_CLICKED

        logger.info("Opened %s via anchor click: %s", element_id, url)
        return NavigationOutcome.CLICKED

    def _click_through(self, url: str) -> None:
        anchor = self.browser.create_anchor()
        anchor.href = url
        anchor.target = "_blank"
        anchor.rel = "noopener noreferrer"
        try:
            anchor.click()
        finally:
            try:
                anchor.remove()
            except Exception as exc:
                # remove() nunca decide el resultado de la navegación.
                logger.warning("Could not remove temporary anchor for %s: %s", url, exc)
