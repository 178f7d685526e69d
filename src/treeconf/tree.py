"""Configuration tree: dotted-path access and recursive merge."""

import logging
from typing import Any

from .exceptions import ConfigValueError
from .exceptions import TypeConflictError
from .models import Node
from .models import NodeKind
from .utils import join_path
from .utils import split_path

logger = logging.getLogger(__name__)


class Tree:
    """Owns a root section node and addresses its children by dotted path.

    A path such as "a.b.c" descends through sections "a" and "b" to the
    node "c", which may be of any kind. The tree is a plain mutable
    structure without locking.

    Args:
        root: Root section node (a new empty section when omitted)
    """

    def __init__(self, root: Node | None = None):
        if root is None:
            root = Node.section()
        if not root.is_section:
            raise ConfigValueError(f"tree root must be a section, got {root.kind.value}")
        self.root = root

    def get(self, path: str) -> tuple[Node | None, bool]:
        """Look up the node at path.

        Never raises: a missing segment, a non-section intermediate or a
        malformed path all report not found.

        Returns:
            (node, True) when found, (None, False) otherwise
        """
        parts = split_path(path)
        if parts is None:
            return None, False

        current = self.root
        for part in parts:
            if not current.is_section or part not in current.value:
                return None, False
            current = current.value[part]
        return current, True

    def set(self, path: str, value: Any) -> None:
        """Set the node at path, creating intermediate sections as needed.

        Args:
            path: Dotted key path
            value: Node or plain Python value

        Raises:
            ConfigValueError: If the path is malformed or value unsupported
            TypeConflictError: If an intermediate segment is not a section
        """
        parts = split_path(path)
        if parts is None:
            raise ConfigValueError(f"invalid key path: '{path}'")

        node = Node.from_value(value)
        parent = self._ensure_section(parts[:-1])
        parent.value[parts[-1]] = node

    def keys(self, path: str = "") -> list[str]:
        """Ordered immediate child keys of the section at path.

        An empty path lists the root. Missing or non-section paths give [].
        """
        if not path:
            return list(self.root.value)
        node, found = self.get(path)
        if not found or not node.is_section:
            return []
        return list(node.value)

    def merge(self, source: "Tree | None", target_path: str = "") -> None:
        """Merge source's root section into the section at target_path.

        Merge rules, applied key by key:
        - key missing in target: a copy of the source node is inserted
        - both sections: merged recursively
        - neither a section: the source value replaces the target value
        - exactly one a section: TypeConflictError, the key is left as is

        Keys merged before a conflict stay merged.

        Args:
            source: Tree to merge from
            target_path: Destination section path (root when empty); created
                when missing

        Raises:
            ConfigValueError: If source is None
            TypeConflictError: On a section/non-section clash
        """
        if source is None:
            raise ConfigValueError("source is nil")

        if target_path:
            parts = split_path(target_path)
            if parts is None:
                raise ConfigValueError(f"invalid key path: '{target_path}'")
            target = self._ensure_section(parts)
        else:
            target = self.root

        logger.debug(f"Merging {len(source.root.value)} key(s) into '{target_path or '<root>'}'")
        _merge_sections(target, source.root, target_path)

    def to_value(self) -> dict[str, Any]:
        """Plain ordered dict of the whole tree."""
        return self.root.to_value()

    def _ensure_section(self, parts: list[str]) -> Node:
        current = self.root
        walked: list[str] = []
        for part in parts:
            walked.append(part)
            child = current.value.get(part)
            if child is None:
                child = Node.section()
                current.value[part] = child
            elif not child.is_section:
                raise TypeConflictError(".".join(walked), NodeKind.SECTION, child.kind)
            current = child
        return current


def _merge_sections(target: Node, source: Node, prefix: str) -> None:
    for key, src in source.value.items():
        path = join_path(prefix, key)
        dst = target.value.get(key)

        if dst is None:
            target.value[key] = src.copy()
        elif dst.is_section and src.is_section:
            _merge_sections(dst, src, path)
        elif dst.is_section or src.is_section:
            raise TypeConflictError(path, src.kind, dst.kind)
        else:
            target.value[key] = src.copy()
