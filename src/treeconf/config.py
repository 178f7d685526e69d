"""Config facade: typed access over a tree with profile resolution."""

import json
import logging
from collections.abc import Callable
from collections.abc import Mapping
from typing import Any
from typing import TypeVar

import yaml

from .exceptions import ConfigValueError
from .models import Node
from .models import NodeKind
from .profile import ProfileResolver
from .tree import Tree
from .utils import narrow_float32
from .utils import narrow_int
from .utils import narrow_int64

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Converters return None when the node cannot be read as the requested type.


def _to_string(node: Node) -> str | None:
    if node.kind is NodeKind.STRING:
        return node.value
    return None


def _to_int(node: Node) -> int | None:
    if node.kind is NodeKind.INT:
        return narrow_int(node.value)
    return None


def _to_int64(node: Node) -> int | None:
    if node.kind is NodeKind.INT:
        return narrow_int64(node.value)
    return None


def _to_float64(node: Node) -> float | None:
    if node.kind is NodeKind.FLOAT:
        return node.value
    if node.kind is NodeKind.INT:
        return float(node.value)
    return None


def _to_float32(node: Node) -> float | None:
    value = _to_float64(node)
    if value is None:
        return None
    return narrow_float32(value)


def _to_bool(node: Node) -> bool | None:
    if node.kind is NodeKind.BOOL:
        return node.value
    return None


def _require(value: Any, types: tuple[type, ...], kind: NodeKind) -> None:
    # bool subclasses int, only accept it where bool is asked for
    if (isinstance(value, bool) and bool not in types) or not isinstance(value, types):
        raise ConfigValueError(f"cannot store {type(value).__name__} as {kind.value}")


class Config:
    """Typed, profile-aware view over a configuration tree.

    Every getter comes in a try form returning ``(value, found)`` and a
    default form returning the value or the given default. A path that is
    missing, or whose node cannot be converted to the requested type, is a
    miss: try forms return the type's zero value with ``found=False``.

    When a profile is active, reads try ``<profile>.<path>`` before
    ``<path>``. Writes (``set_*``) always target the bare path.
    If a write replaces the active profile's section with a non-section
    value, the profile is dropped and reads fall back to global keys.

    Configs returned by ``get_sub_config`` share nodes with their parent:
    writes through either are visible in both. No locking is done; callers
    sharing a Config across threads must serialize access.

    Args:
        tree: Tree to wrap (a new empty tree when omitted)
    """

    def __init__(self, tree: Tree | None = None):
        self.tree = tree if tree is not None else Tree()
        self._resolver = ProfileResolver(self.tree)

    @classmethod
    def new_empty(cls) -> "Config":
        """Config with an empty root section."""
        return cls(Tree())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """Config built from plain Python values.

        Raises:
            ConfigValueError: If data holds values with no node kind
        """
        return cls(Tree(Node.from_value(dict(data))))

    def __repr__(self) -> str:
        return f"Config(keys={self.keys()!r}, profile={self.profile!r})"

    # ===== Profile =====

    @property
    def profile(self) -> str:
        """Active profile name, or "" when none is active."""
        return self._resolver.profile

    def set_profile(self, name: str) -> None:
        """Activate the profile section name.

        Raises:
            ProfileNotFoundError: If name is not a section; state is unchanged
        """
        self._resolver.set_profile(name)

    def clear_profile(self) -> None:
        """Return to global-only resolution."""
        self._resolver.clear_profile()

    # ===== Lookup =====

    def exists(self, path: str) -> bool:
        """True if path resolves (through the profile) to any node."""
        _, found = self._resolver.resolve(path)
        return found

    def keys(self) -> list[str]:
        """Ordered root keys."""
        return self.tree.keys()

    def keys_by_path(self, path: str) -> list[str]:
        """Ordered child keys of the section at path ([] when not a section)."""
        return self.tree.keys(path) if path else []

    def get_sub_config(self, path: str) -> tuple["Config | None", bool]:
        """Config rooted at the section found at path.

        The returned Config shares the section with this one; it is not a
        copy. It starts without an active profile.

        Returns:
            (config, True), or (None, False) if path is not a section
        """
        node, found = self._resolver.resolve(path)
        if not found or not node.is_section:
            return None, False
        return Config(Tree(node)), True

    # ===== Scalar getters =====

    def get_string(self, path: str) -> tuple[str, bool]:
        return self._scalar(path, _to_string, "")

    def get_string_default(self, path: str, default: str) -> str:
        return self._scalar(path, _to_string, default)[0]

    def get_int(self, path: str) -> tuple[int, bool]:
        return self._scalar(path, _to_int, 0)

    def get_int_default(self, path: str, default: int) -> int:
        return self._scalar(path, _to_int, default)[0]

    def get_int64(self, path: str) -> tuple[int, bool]:
        return self._scalar(path, _to_int64, 0)

    def get_int64_default(self, path: str, default: int) -> int:
        return self._scalar(path, _to_int64, default)[0]

    def get_float32(self, path: str) -> tuple[float, bool]:
        """Read a float narrowed to single precision.

        The stored value keeps full precision; narrowing happens on read.
        """
        return self._scalar(path, _to_float32, 0.0)

    def get_float32_default(self, path: str, default: float) -> float:
        return self._scalar(path, _to_float32, default)[0]

    def get_float64(self, path: str) -> tuple[float, bool]:
        return self._scalar(path, _to_float64, 0.0)

    def get_float64_default(self, path: str, default: float) -> float:
        return self._scalar(path, _to_float64, default)[0]

    def get_bool(self, path: str) -> tuple[bool, bool]:
        return self._scalar(path, _to_bool, False)

    def get_bool_default(self, path: str, default: bool) -> bool:
        return self._scalar(path, _to_bool, default)[0]

    # ===== List getters =====

    def get_string_list(self, path: str) -> tuple[list[str], bool]:
        return self._list(path, _to_string)

    def get_string_list_default(self, path: str, default: list[str]) -> list[str]:
        return self._list_default(path, _to_string, default)

    def get_int_list(self, path: str) -> tuple[list[int], bool]:
        return self._list(path, _to_int)

    def get_int_list_default(self, path: str, default: list[int]) -> list[int]:
        return self._list_default(path, _to_int, default)

    def get_int64_list(self, path: str) -> tuple[list[int], bool]:
        return self._list(path, _to_int64)

    def get_int64_list_default(self, path: str, default: list[int]) -> list[int]:
        return self._list_default(path, _to_int64, default)

    def get_float32_list(self, path: str) -> tuple[list[float], bool]:
        return self._list(path, _to_float32)

    def get_float32_list_default(self, path: str, default: list[float]) -> list[float]:
        return self._list_default(path, _to_float32, default)

    def get_float64_list(self, path: str) -> tuple[list[float], bool]:
        return self._list(path, _to_float64)

    def get_float64_list_default(self, path: str, default: list[float]) -> list[float]:
        return self._list_default(path, _to_float64, default)

    def get_bool_list(self, path: str) -> tuple[list[bool], bool]:
        return self._list(path, _to_bool)

    def get_bool_list_default(self, path: str, default: list[bool]) -> list[bool]:
        return self._list_default(path, _to_bool, default)

    # ===== Setters =====

    def set_value(self, path: str, value: Any) -> None:
        """Set a node or plain Python value at the bare path.

        Raises:
            ConfigValueError: If the path is malformed or value unsupported
            TypeConflictError: If an intermediate segment is not a section
        """
        self.tree.set(path, value)

    def set_string(self, path: str, value: str) -> None:
        _require(value, (str,), NodeKind.STRING)
        self.tree.set(path, Node(NodeKind.STRING, value))

    def set_int(self, path: str, value: int) -> None:
        _require(value, (int,), NodeKind.INT)
        if narrow_int(value) is None:
            raise ConfigValueError(f"value {value} is out of int range")
        self.tree.set(path, Node(NodeKind.INT, value))

    def set_int64(self, path: str, value: int) -> None:
        _require(value, (int,), NodeKind.INT)
        if narrow_int64(value) is None:
            raise ConfigValueError(f"value {value} is out of int64 range")
        self.tree.set(path, Node(NodeKind.INT, value))

    def set_float32(self, path: str, value: float) -> None:
        _require(value, (int, float), NodeKind.FLOAT)
        narrowed = narrow_float32(value)
        if narrowed is None:
            raise ConfigValueError(f"value {value} is out of float32 range")
        self.tree.set(path, Node(NodeKind.FLOAT, narrowed))

    def set_float64(self, path: str, value: float) -> None:
        _require(value, (int, float), NodeKind.FLOAT)
        self.tree.set(path, Node(NodeKind.FLOAT, float(value)))

    def set_bool(self, path: str, value: bool) -> None:
        _require(value, (bool,), NodeKind.BOOL)
        self.tree.set(path, Node(NodeKind.BOOL, value))

    # ===== Merge =====

    def merge(self, source: "Config | None") -> None:
        """Merge source's whole tree into this config's root.

        Raises:
            ConfigValueError: If source is None
            TypeConflictError: On a section/non-section clash; keys merged
                before the clash stay merged
        """
        if source is None:
            raise ConfigValueError("source is nil")
        self.tree.merge(source.tree)

    def merge_to_section(self, path: str, source: "Config | None") -> None:
        """Merge source's tree into the section at path, creating it if needed.

        Raises:
            ConfigValueError: If source is None or path is empty
            TypeConflictError: On a section/non-section clash
        """
        if source is None:
            raise ConfigValueError("source is nil")
        if not path:
            raise ConfigValueError("key is empty")
        self.tree.merge(source.tree, path)

    # ===== Serialization =====

    def to_dict(self) -> dict[str, Any]:
        """Whole tree as a plain ordered dict, ignoring the active profile."""
        return self.tree.to_value()

    def to_json(self, indent: int | None = None) -> str:
        """Whole tree as a JSON document, key order preserved.

        Raises:
            ConfigValueError: If the tree holds NaN or infinite floats
        """
        try:
            return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False, allow_nan=False)
        except ValueError as e:
            raise ConfigValueError(f"configuration is not representable as JSON: {e}") from e

    def to_yaml(self) -> str:
        """Whole tree as a YAML document, key order preserved."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True)

    # ===== Private Helpers =====

    def _scalar(self, path: str, convert: Callable[[Node], T | None], default: T) -> tuple[T, bool]:
        node, found = self._resolver.resolve(path)
        if not found:
            return default, False
        value = convert(node)
        if value is None:
            return default, False
        return value, True

    def _list(self, path: str, convert: Callable[[Node], T | None]) -> tuple[list[T], bool]:
        node, found = self._resolver.resolve(path)
        if not found or node.kind is not NodeKind.LIST:
            return [], False

        values = []
        for item in node.value:
            value = convert(item)
            if value is None:
                return [], False
            values.append(value)
        return values, True

    def _list_default(self, path: str, convert: Callable[[Node], T | None], default: list[T]) -> list[T]:
        values, found = self._list(path, convert)
        return values if found else default
