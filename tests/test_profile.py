"""Tests for ProfileResolver."""

import pytest
from treeconf import Node
from treeconf import NodeKind
from treeconf import ProfileNotFoundError
from treeconf import ProfileResolver
from treeconf import Tree


class TestProfileResolver:
    """Test profile overlay resolution."""

    @pytest.fixture
    def resolver(self):
        tree = Tree(
            Node.from_value(
                {
                    "key": "A",
                    "only_global": "G",
                    "prod": {"key": "B"},
                    "env": {"dev": {"key": "D"}},
                    "flag": True,
                }
            )
        )
        return ProfileResolver(tree)

    def test_no_profile_by_default(self, resolver):
        """Test resolver starts without a profile."""
        assert resolver.profile == ""

    def test_resolve_without_profile(self, resolver):
        """Test bare lookups without a profile."""
        assert resolver.resolve("key") == (Node(NodeKind.STRING, "A"), True)

    def test_profile_shadows_global(self, resolver):
        """Test profile values win over globals."""
        resolver.set_profile("prod")
        assert resolver.resolve("key") == (Node(NodeKind.STRING, "B"), True)

    def test_fallback_to_global(self, resolver):
        """Test keys missing from the profile fall back to globals."""
        resolver.set_profile("prod")
        assert resolver.resolve("only_global") == (Node(NodeKind.STRING, "G"), True)

    def test_clear_restores_global(self, resolver):
        """Test clearing the profile restores global resolution."""
        resolver.set_profile("prod")
        resolver.clear_profile()
        assert resolver.profile == ""
        assert resolver.resolve("key") == (Node(NodeKind.STRING, "A"), True)

    def test_clear_is_idempotent(self, resolver):
        """Test clearing twice (or without a profile) succeeds."""
        resolver.clear_profile()
        resolver.clear_profile()
        assert resolver.profile == ""

    def test_missing_in_both(self, resolver):
        """Test a key absent everywhere is not found."""
        resolver.set_profile("prod")
        assert resolver.resolve("missing") == (None, False)

    def test_nested_profile(self, resolver):
        """Test a dotted profile path."""
        resolver.set_profile("env.dev")
        assert resolver.resolve("key") == (Node(NodeKind.STRING, "D"), True)

    def test_unknown_profile(self, resolver):
        """Test unknown profiles are rejected with the documented message."""
        with pytest.raises(ProfileNotFoundError, match="profile doesn't exists: ghost"):
            resolver.set_profile("ghost")
        assert resolver.profile == ""

    def test_unknown_profile_keeps_active(self, resolver):
        """Test a failed switch leaves the previous profile active."""
        resolver.set_profile("prod")
        with pytest.raises(ProfileNotFoundError) as exc_info:
            resolver.set_profile("ghost")
        assert exc_info.value.profile == "ghost"
        assert resolver.profile == "prod"

    def test_scalar_is_not_a_profile(self, resolver):
        """Test a scalar root key cannot be a profile."""
        with pytest.raises(ProfileNotFoundError):
            resolver.set_profile("flag")

    def test_profile_dropped_when_replaced_by_scalar(self, resolver):
        """Test a profile whose section became a scalar is deactivated."""
        resolver.set_profile("prod")
        resolver.tree.set("prod", 1)
        assert resolver.resolve("key") == (Node(NodeKind.STRING, "A"), True)
        assert resolver.profile == ""
