"""Element tree helpers.

Flex lists the elements of a job as a tree (main folder, department
subfolders, documents). The picker screens flatten it, search it, and filter
it while keeping the ancestors of every match so the hierarchy still reads.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class ElementNode(BaseModel):
    """A node of the Flex element tree."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    node_id: str | None = Field(default=None, alias="nodeId")
    element_id: str | None = Field(default=None, alias="elementId")
    parent_element_id: str | None = Field(default=None, alias="parentElementId")
    domain_id: str | None = Field(default=None, alias="domainId")
    definition_id: str | None = Field(default=None, alias="definitionId")
    schema_id: str | None = Field(default=None, alias="schemaId")
    view_hint: str | None = Field(default=None, alias="viewHint")
    document_number: str | None = Field(default=None, alias="documentNumber")
    display_name: str | None = Field(default=None, alias="displayName")
    metadata: dict[str, Any] = Field(default_factory=dict)
    children: list["ElementNode"] = Field(default_factory=list)

    @property
    def primary_id(self) -> str | None:
        for candidate in (self.node_id, self.element_id, self.metadata.get("elementId")):
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        return None

    @property
    def effective_definition_id(self) -> str | None:
        for candidate in (self.definition_id, self.metadata.get("definitionId")):
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        return None


class FlatElement(BaseModel):
    element_id: str | None
    display_name: str | None = None
    document_number: str | None = None
    parent_element_id: str | None = None
    depth: int = 0
    node: ElementNode = Field(exclude=True, repr=False)


def flatten_tree(nodes: Iterable[ElementNode]) -> list[FlatElement]:
    """Pre-order walk; each entry records its depth and parent id."""

    out: list[FlatElement] = []

    def walk(items: Iterable[ElementNode], parent_id: str | None, depth: int) -> None:
        for node in items:
            out.append(
                FlatElement(
                    element_id=node.primary_id,
                    display_name=node.display_name,
                    document_number=node.document_number,
                    parent_element_id=parent_id,
                    depth=depth,
                    node=node,
                )
            )
            if node.children:
                walk(node.children, node.primary_id, depth + 1)

    walk(nodes, None, 0)
    return out


def search_tree(nodes: Iterable[ElementNode], query: str | None) -> list[FlatElement]:
    """Case-insensitive match on display name or document number."""

    flat = flatten_tree(nodes)
    needle = (query or "").strip().lower()
    if not needle:
        return flat
    return [
        item
        for item in flat
        if needle in (item.display_name or "").lower() or needle in (item.document_number or "").lower()
    ]


def filter_tree_with_ancestors(
    nodes: Iterable[ElementNode],
    predicate: Callable[[ElementNode], bool],
) -> list[ElementNode]:
    """Keep matching nodes plus the ancestors needed to reach them."""

    kept: list[ElementNode] = []
    for node in nodes:
        children = filter_tree_with_ancestors(node.children, predicate)
        if predicate(node) or children:
            kept.append(node.model_copy(update={"children": children}))
    return kept
