"""Link resolution orchestration.

Two entry points share the classifier and the URL builder:

- `LinkResolver.resolve` is synchronous and never performs I/O. It only
  returns `None` for an invalid element id; otherwise it falls back to the
  `simple-element` template.
- `LinkResolver.resolve_async` may hit the network. Strong local hints build
  the URL with zero network calls; weak or missing hints trigger one metadata
  lookup (token from the shared credential cache), whose fields are merged
  without overwriting local ones. If nothing decides the schema the result is
  `None` and the caller picks its own fallback.

Auth and metadata failures never propagate from here: they are logged and the
resolver continues with the hints it already had.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from adapters.element_metadata import ElementMetadataClient
from adapters.secret_client import SecretEndpointClient
from core.config import AppSettings, DEFAULT_UI_BASE_URL
from core.domain.errors import AuthResolutionError, InvalidElementIdError, MetadataFetchError
from core.domain.intents import MatchReason, SchemaIntent
from core.domain.models import (
    ElementReference,
    LinkHints,
    ResolutionContext,
    SchemaMetadata,
    require_element_id,
)
from core.interfaces.sources import MetadataSource, TokenSource
from core.services.classifier import explain
from core.services.credential_cache import CredentialCache
from core.services.element_tree import ElementNode
from core.services.url_builder import build_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkResolution:
    """Outcome of a resolution, with the evidence that produced it.

    `used_network` is set once the token/metadata lookup was attempted, even
    when that lookup failed.
    """

    element_id: str
    intent: SchemaIntent | None
    reason: MatchReason
    url: str | None
    used_network: bool = False

    @property
    def resolved(self) -> bool:
        return self.url is not None


class LinkResolver:
    def __init__(
        self,
        *,
        credentials: CredentialCache,
        metadata_source: MetadataSource,
        base_url: str = DEFAULT_UI_BASE_URL,
    ) -> None:
        self.credentials = credentials
        self.metadata_source = metadata_source
        self.base_url = base_url

    def describe(
        self,
        ref: ElementReference | str | None,
        context: ResolutionContext | None = None,
    ) -> LinkResolution:
        """Synchronous resolution from local hints only.

        Raises `InvalidElementIdError` for a missing or blank id.
        """

        reference = ElementReference.coerce(ref)
        element_id = require_element_id(reference)
        result = explain(LinkHints.from_sources(reference, context))
        url = build_url(result.intent, element_id, base_url=self.base_url)
        logger.info("Resolved %s as %s (%s): %s", element_id, result.intent.value, result.reason.value, url)
        return LinkResolution(element_id, result.intent, result.reason, url)

    def resolve(
        self,
        ref: ElementReference | str | None,
        context: ResolutionContext | None = None,
    ) -> str | None:
        try:
            return self.describe(ref, context).url
        except InvalidElementIdError as exc:
            logger.error("%s", exc)
            return None

    async def describe_async(
        self,
        ref: ElementReference | str | None,
        context: ResolutionContext | None = None,
    ) -> LinkResolution:
        """Resolution that may fetch remote metadata.

        Raises `InvalidElementIdError` for a missing or blank id; every other
        failure degrades to an unresolved result.
        """

        reference = ElementReference.coerce(ref)
        element_id = require_element_id(reference)
        hints = LinkHints.from_sources(reference, context)

        result = explain(hints, default=None)
        if result.is_strong:
            url = build_url(result.intent, element_id, base_url=self.base_url)
            logger.info("Resolved %s from local hints as %s (%s)", element_id, result.intent.value, result.reason.value)
            return LinkResolution(element_id, result.intent, result.reason, url)

        logger.debug("Local hints for %s are not conclusive (%s); fetching metadata", element_id, result.reason.value)
        metadata = await self._fetch_metadata(element_id)
        if metadata is not None:
            result = explain(hints.merged_with(metadata), default=None)

        if result.intent is None:
            logger.error(
                "Unable to resolve Flex URL schema for %s (job=%s folder=%s domain=%s definition=%s)",
                element_id,
                hints.job_type,
                hints.folder_type,
                hints.domain_id,
                hints.definition_id,
            )
            return LinkResolution(element_id, None, result.reason, None, used_network=True)

        url = build_url(result.intent, element_id, base_url=self.base_url)
        logger.info("Resolved %s as %s (%s): %s", element_id, result.intent.value, result.reason.value, url)
        return LinkResolution(element_id, result.intent, result.reason, url, used_network=True)

    async def resolve_async(
        self,
        ref: ElementReference | str | None,
        context: ResolutionContext | None = None,
    ) -> str | None:
        try:
            resolution = await self.describe_async(ref, context)
        except InvalidElementIdError as exc:
            logger.error("%s", exc)
            return None
        return resolution.url

    async def resolve_node(
        self,
        node: ElementNode,
        context: ResolutionContext | None = None,
    ) -> str | None:
        """Resolve a node from an element tree listing."""

        try:
            reference = ElementReference.from_node(node)
        except InvalidElementIdError:
            logger.error("Node is missing a usable element identifier: %r", node.display_name)
            return None
        return await self.resolve_async(reference, context)

    async def _fetch_metadata(self, element_id: str) -> SchemaMetadata | None:
        try:
            token = await self.credentials.get_token()
        except AuthResolutionError as exc:
            logger.warning("Skipping metadata lookup for %s: %s", element_id, exc)
            return None

        try:
            return await self.metadata_source.fetch_metadata(element_id, token)
        except MetadataFetchError as exc:
            logger.warning("Metadata lookup for %s failed: %s", element_id, exc)
            return None


def build_link_resolver(settings: AppSettings | None = None) -> LinkResolver:
    """Wire the resolver with the HTTP adapters described by `settings`."""

    settings = settings or AppSettings()
    secrets: TokenSource = SecretEndpointClient(settings)
    return LinkResolver(
        credentials=CredentialCache(secrets.fetch_token),
        metadata_source=ElementMetadataClient(settings),
        base_url=settings.ui_base_url,
    )
