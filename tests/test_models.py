"""Tests for Node and NodeKind."""

import pytest
from treeconf import ConfigValueError
from treeconf import Node
from treeconf import NodeKind


class TestNodeFromValue:
    """Test Node.from_value conversion."""

    @pytest.mark.parametrize(
        "value,kind",
        [
            (None, NodeKind.NULL),
            (True, NodeKind.BOOL),
            (False, NodeKind.BOOL),
            (1, NodeKind.INT),
            (1.5, NodeKind.FLOAT),
            ("text", NodeKind.STRING),
            ([1, 2], NodeKind.LIST),
            ((1, 2), NodeKind.LIST),
            ({"a": 1}, NodeKind.SECTION),
        ],
    )
    def test_kinds(self, value, kind):
        """Test each plain value maps to its node kind."""
        assert Node.from_value(value).kind is kind

    def test_bool_is_not_int(self):
        """Test bools are tagged BOOL even though bool subclasses int."""
        node = Node.from_value(True)
        assert node.kind is NodeKind.BOOL
        assert node.value is True

    def test_nested(self):
        """Test nested structures convert recursively."""
        node = Node.from_value({"a": {"b": [1, "x"]}})
        inner = node.value["a"].value["b"]
        assert inner.kind is NodeKind.LIST
        assert [item.kind for item in inner.value] == [NodeKind.INT, NodeKind.STRING]

    def test_node_passes_through(self):
        """Test an existing node is returned as is."""
        node = Node(NodeKind.STRING, "x")
        assert Node.from_value(node) is node

    def test_unsupported_type(self):
        """Test unsupported values raise ConfigValueError."""
        with pytest.raises(ConfigValueError, match="unsupported"):
            Node.from_value(object())

    def test_non_string_key(self):
        """Test mappings need string keys."""
        with pytest.raises(ConfigValueError, match="keys must be strings"):
            Node.from_value({1: "one"})


class TestNodeToValue:
    """Test conversion back to plain values."""

    def test_round_trip(self):
        """Test to_value mirrors from_value."""
        data = {"z": 1, "a": {"list": [True, None, 2.5]}, "m": "text"}
        assert Node.from_value(data).to_value() == data

    def test_key_order_preserved(self):
        """Test section key order survives conversion."""
        data = {"z": 1, "a": 2, "m": 3}
        assert list(Node.from_value(data).to_value()) == ["z", "a", "m"]


class TestNodeCopy:
    """Test Node.copy."""

    def test_deep_copy(self):
        """Test copies do not share nested nodes."""
        node = Node.from_value({"a": {"b": [1]}})
        copied = node.copy()
        assert copied == node

        copied.value["a"].value["b"].value.append(Node.from_value(2))
        assert node.value["a"].value["b"].value == [Node(NodeKind.INT, 1)]

    def test_section_helpers(self):
        """Test section and null constructors."""
        assert Node.section().is_section
        assert Node.section().value == {}
        assert Node.null().kind is NodeKind.NULL
        assert not Node.null().is_section
