"""Intent classification.

Pure function of the available hints: no I/O, no side effects. Rules are
evaluated top to bottom and the first match wins:

1. explicit `view_hint` (unless it is the `"auto"` sentinel)
2. normalized `schema_id` in the category registry
3. `definition_id` in the per-template registries
4. `domain_id` in the per-intent allow-lists; the generic
   `simple-project-element` domain is only a weak signal and is applied after
   rule 5 found nothing
5. `dryhire` / `tourdate` job or folder type
6. the caller's default (`simple-element`, or `None` for callers that can
   still fetch remote metadata)
"""

from __future__ import annotations

import logging

from core.domain.intents import AUTO_VIEW_HINT, SIMPLE_JOB_CATEGORIES, MatchReason, SchemaIntent
from core.domain.models import Classification, ElementReference, LinkHints, ResolutionContext
from core.domain.registries import (
    is_simple_project_element,
    lookup_category,
    lookup_definition,
    lookup_domain,
    normalize_category,
)

logger = logging.getLogger(__name__)


def _simple_job_category(hints: LinkHints) -> bool:
    for value in (hints.job_type, hints.folder_type):
        if value is not None and value.value in SIMPLE_JOB_CATEGORIES:
            return True
    return False


def explain(
    hints: LinkHints | None = None,
    *,
    default: SchemaIntent | None = SchemaIntent.SIMPLE_ELEMENT,
) -> Classification:
    """Classify and report which rule decided."""

    hints = hints or LinkHints()

    view_hint = normalize_category(hints.view_hint)
    if view_hint is not None and view_hint != AUTO_VIEW_HINT:
        intent = lookup_category(view_hint)
        if intent is not None:
            return Classification(intent, MatchReason.VIEW_HINT)
        logger.debug("Ignoring unknown view hint %r", hints.view_hint)

    intent = lookup_category(hints.schema_id)
    if intent is not None:
        return Classification(intent, MatchReason.SCHEMA_ID)

    intent = lookup_definition(hints.definition_id)
    if intent is not None:
        return Classification(intent, MatchReason.DEFINITION_ID)

    intent = lookup_domain(hints.domain_id)
    if intent is not None:
        return Classification(intent, MatchReason.DOMAIN_ID)
    weak_simple = is_simple_project_element(hints.domain_id)

    if _simple_job_category(hints):
        return Classification(SchemaIntent.SIMPLE_ELEMENT, MatchReason.JOB_TYPE)

    if weak_simple:
        return Classification(SchemaIntent.SIMPLE_ELEMENT, MatchReason.DOMAIN_ID_WEAK)

    if default is not None:
        return Classification(default, MatchReason.DEFAULT)
    return Classification(None, MatchReason.UNRESOLVED)


def classify(
    hints: LinkHints | None = None,
    *,
    default: SchemaIntent | None = SchemaIntent.SIMPLE_ELEMENT,
) -> SchemaIntent | None:
    """Return the intent for `hints`, or `default` when nothing matches."""

    return explain(hints, default=default).intent


def classify_reference(
    ref: ElementReference | None = None,
    context: ResolutionContext | None = None,
    *,
    default: SchemaIntent | None = SchemaIntent.SIMPLE_ELEMENT,
) -> SchemaIntent | None:
    return classify(LinkHints.from_sources(ref, context), default=default)
