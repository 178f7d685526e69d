"""Data models for treeconf."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import ConfigValueError


class NodeKind(Enum):
    """Kind tag of a configuration node.

    The values are used verbatim in error messages.
    """

    NULL = "NULL"
    BOOL = "BOOL"
    INT = "INT"
    FLOAT = "FLOAT"
    STRING = "STRING"
    LIST = "LIST"
    SECTION = "SECTION"


@dataclass(eq=True)
class Node:
    """A tagged configuration value.

    The payload type is fixed by the kind:

    - NULL: None
    - BOOL: bool
    - INT: int (full width, narrowed on read)
    - FLOAT: float
    - STRING: str
    - LIST: list[Node]
    - SECTION: dict[str, Node] (insertion ordered)

    Attributes:
        kind: Node kind tag
        value: Payload matching the kind
    """

    kind: NodeKind
    value: Any = None

    @classmethod
    def null(cls) -> "Node":
        return cls(NodeKind.NULL, None)

    @classmethod
    def section(cls, children: dict[str, "Node"] | None = None) -> "Node":
        return cls(NodeKind.SECTION, {} if children is None else children)

    @classmethod
    def from_value(cls, value: Any) -> "Node":
        """Build a node tree from plain Python values.

        Args:
            value: None, bool, int, float, str, list/tuple, mapping or Node

        Returns:
            Node mirroring the value

        Raises:
            ConfigValueError: If a value (or a nested one) has no node kind
        """
        if isinstance(value, Node):
            return value
        if value is None:
            return cls(NodeKind.NULL, None)
        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return cls(NodeKind.BOOL, value)
        if isinstance(value, int):
            return cls(NodeKind.INT, value)
        if isinstance(value, float):
            return cls(NodeKind.FLOAT, value)
        if isinstance(value, str):
            return cls(NodeKind.STRING, value)
        if isinstance(value, (list, tuple)):
            return cls(NodeKind.LIST, [cls.from_value(item) for item in value])
        if isinstance(value, Mapping):
            children = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise ConfigValueError(f"section keys must be strings, got {type(key).__name__}")
                children[key] = cls.from_value(item)
            return cls(NodeKind.SECTION, children)
        raise ConfigValueError(f"unsupported configuration value type: {type(value).__name__}")

    @property
    def is_section(self) -> bool:
        return self.kind is NodeKind.SECTION

    def to_value(self) -> Any:
        """Convert the node back to plain Python values (dicts keep key order)."""
        if self.kind is NodeKind.SECTION:
            return {key: child.to_value() for key, child in self.value.items()}
        if self.kind is NodeKind.LIST:
            return [item.to_value() for item in self.value]
        return self.value

    def copy(self) -> "Node":
        """Deep copy of the node."""
        if self.kind is NodeKind.SECTION:
            return Node(self.kind, {key: child.copy() for key, child in self.value.items()})
        if self.kind is NodeKind.LIST:
            return Node(self.kind, [item.copy() for item in self.value])
        return Node(self.kind, self.value)
