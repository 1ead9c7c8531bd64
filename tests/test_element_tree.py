"""
Tests for element tree helpers
==============================
"""

import pytest

from core.domain.errors import InvalidElementIdError
from core.domain.models import ElementReference
from core.services.element_tree import ElementNode, filter_tree_with_ancestors, flatten_tree, search_tree

TREE = [
    {
        "nodeId": "main",
        "displayName": "Festival 2024",
        "children": [
            {
                "nodeId": "sound",
                "displayName": "Sonido",
                "children": [
                    {"nodeId": "budget", "displayName": "Presupuesto", "documentNumber": "24-0101"},
                    {"elementId": "pull", "displayName": "Pull sheet", "documentNumber": "24-0102"},
                ],
            },
            {"metadata": {"elementId": "lights"}, "displayName": "Luces"},
        ],
    }
]


@pytest.fixture
def nodes():
    return [ElementNode.model_validate(item) for item in TREE]


class TestFlatten:
    def test_pre_order_with_depth_and_parent(self, nodes):
        flat = flatten_tree(nodes)
        assert [f.element_id for f in flat] == ["main", "sound", "budget", "pull", "lights"]
        assert [f.depth for f in flat] == [0, 1, 2, 2, 1]
        assert flat[2].parent_element_id == "sound"
        assert flat[4].parent_element_id == "main"


class TestSearch:
    def test_matches_display_name_case_insensitively(self, nodes):
        assert [f.element_id for f in search_tree(nodes, "SONIDO")] == ["sound"]

    def test_matches_document_number(self, nodes):
        assert [f.element_id for f in search_tree(nodes, "0102")] == ["pull"]

    def test_blank_query_returns_everything(self, nodes):
        assert len(search_tree(nodes, "  ")) == 5


class TestFilterWithAncestors:
    def test_keeps_path_to_match(self, nodes):
        kept = filter_tree_with_ancestors(nodes, lambda n: n.document_number == "24-0101")

        assert [n.primary_id for n in kept] == ["main"]
        assert [n.primary_id for n in kept[0].children] == ["sound"]
        assert [n.primary_id for n in kept[0].children[0].children] == ["budget"]

    def test_input_tree_is_untouched(self, nodes):
        filter_tree_with_ancestors(nodes, lambda n: False)
        assert len(nodes[0].children) == 2

    def test_definition_id_from_metadata(self):
        node = ElementNode.model_validate({"nodeId": "x", "metadata": {"definitionId": " def-1 "}})
        assert node.effective_definition_id == "def-1"
        assert ElementNode(definition_id="own", metadata={"definitionId": "meta"}).effective_definition_id == "own"


class TestReferenceFromNode:
    def test_metadata_supplies_missing_hints(self):
        node = ElementNode.model_validate(
            {"elementId": "x", "domainId": " ", "metadata": {"domainId": "crew-call", "viewHint": "auto"}}
        )
        ref = ElementReference.from_node(node)
        assert ref.element_id == "x"
        assert ref.domain_id == "crew-call"
        assert ref.view_hint == "auto"

    def test_node_id_wins(self):
        node = ElementNode.model_validate({"nodeId": "n", "elementId": "e"})
        assert ElementReference.from_node(node).element_id == "n"

    def test_missing_id(self):
        with pytest.raises(InvalidElementIdError):
            ElementReference.from_node(ElementNode(display_name="nothing"))
