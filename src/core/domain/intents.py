"""Intents of the link engine.

A `SchemaIntent` picks the URL template used to open an element in Flex. It
says nothing about the business meaning of the element: a budget and a
purchase order share the same intent.
"""

from __future__ import annotations

from enum import Enum

AUTO_VIEW_HINT = "auto"


class SchemaIntent(str, Enum):
    """The six URL-template families supported by Flex deep links."""

    SIMPLE_ELEMENT = "simple-element"
    FIN_DOC = "fin-doc"
    EXPENSE_SHEET = "expense-sheet"
    CONTACT_LIST = "contact-list"
    EQUIPMENT_LIST = "equipment-list"
    REMOTE_FILE_LIST = "remote-file-list"

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return self.value.replace("-", " ")


class JobType(str, Enum):
    SINGLE = "single"
    FESTIVAL = "festival"
    DRYHIRE = "dryhire"
    TOURDATE = "tourdate"
    EVENTO = "evento"


class FolderType(str, Enum):
    MAIN = "main"
    DRYHIRE = "dryhire"
    TOURDATE = "tourdate"


class MatchReason(str, Enum):
    """Which classifier rule produced an intent."""

    VIEW_HINT = "view-hint"
    SCHEMA_ID = "schema-id"
    DEFINITION_ID = "definition-id"
    DOMAIN_ID = "domain-id"
    DOMAIN_ID_WEAK = "domain-id-weak"
    JOB_TYPE = "job-type"
    DEFAULT = "default"
    UNRESOLVED = "unresolved"

    @property
    def is_strong(self) -> bool:
        return self in _STRONG_REASONS


# A resolved schemaId counts as strong too: it skips the metadata lookup, so a
# remote viewHint cannot override it.
_STRONG_REASONS = frozenset(
    {
        MatchReason.VIEW_HINT,
        MatchReason.SCHEMA_ID,
        MatchReason.DEFINITION_ID,
        MatchReason.DOMAIN_ID,
        MatchReason.JOB_TYPE,
    }
)

# Job/folder categories that always address a plain folder element.
SIMPLE_JOB_CATEGORIES = frozenset({"dryhire", "tourdate"})
