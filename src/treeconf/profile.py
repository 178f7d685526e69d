"""Profile overlay resolution."""

import logging

from .exceptions import ProfileNotFoundError
from .models import Node
from .tree import Tree
from .utils import join_path

logger = logging.getLogger(__name__)


class ProfileResolver:
    """Resolves keys through an optional profile section.

    With an active profile, "<profile>.<key>" shadows the bare "<key>";
    keys the profile does not define fall back to the global value.

    Args:
        tree: Tree the profile section lives in
    """

    def __init__(self, tree: Tree):
        self.tree = tree
        self._profile = ""

    @property
    def profile(self) -> str:
        """Active profile name, or "" when none is active."""
        self._check_profile()
        return self._profile

    def set_profile(self, name: str) -> None:
        """Activate a profile.

        Args:
            name: Section name (or dotted path) of the profile

        Raises:
            ProfileNotFoundError: If name does not resolve to a section; the
                previously active profile stays active
        """
        node, found = self.tree.get(name)
        if not found or not node.is_section:
            raise ProfileNotFoundError(name)
        self._profile = name
        logger.debug(f"Activated profile '{name}'")

    def clear_profile(self) -> None:
        """Deactivate the profile. Always succeeds."""
        if self._profile:
            logger.debug(f"Cleared profile '{self._profile}'")
        self._profile = ""

    def resolve(self, key: str) -> tuple[Node | None, bool]:
        """Look up key, trying the profile section first."""
        self._check_profile()
        if self._profile and key:
            node, found = self.tree.get(join_path(self._profile, key))
            if found:
                return node, True
        return self.tree.get(key)

    def _check_profile(self) -> None:
        # the profile section may have been replaced by a write since activation
        if not self._profile:
            return
        node, found = self.tree.get(self._profile)
        if not found or not node.is_section:
            logger.debug(f"Dropped profile '{self._profile}', its section was replaced")
            self._profile = ""
