"""Tests for the rendering engine registry."""

import pytest
from treeconf import EngineRegistryError
from treeconf import add_engine
from treeconf import engine_names
from treeconf import get_engine
from treeconf import parse_string
from treeconf import remove_engine


class FakeEngine:
    """Minimal engine reading its settings from a sub config."""

    def __init__(self):
        self.base_dir = None

    def init(self, cfg, base_dir):
        view, found = cfg.get_sub_config("view")
        if found:
            self.base_dir = view.get_string_default("base_dir", base_dir)


class TestEngineRegistry:
    """Test process-wide engine registration."""

    @pytest.fixture(autouse=True)
    def clean_registry(self):
        """Remove engines registered by each test."""
        before = set(engine_names())
        yield
        for name in set(engine_names()) - before:
            remove_engine(name)

    def test_add_and_get(self):
        """Test a registered engine can be looked up."""
        engine = FakeEngine()
        add_engine("go", engine)
        assert get_engine("go") == (engine, True)

    def test_duplicate_name(self):
        """Test duplicate names are rejected."""
        add_engine("go", FakeEngine())
        with pytest.raises(EngineRegistryError) as exc_info:
            add_engine("go", FakeEngine())
        assert str(exc_info.value) == "engine name 'go' is already added"

    def test_none_engine(self):
        """Test None engines are rejected."""
        with pytest.raises(EngineRegistryError, match="engine value is nil"):
            add_engine("custom", None)
        assert get_engine("custom") == (None, False)

    def test_unknown_engine(self):
        """Test lookups of unknown names."""
        assert get_engine("myengine") == (None, False)

    def test_registration_order(self):
        """Test names are listed in registration order."""
        add_engine("first", FakeEngine())
        add_engine("second", FakeEngine())
        names = engine_names()
        assert names.index("first") < names.index("second")

    def test_remove(self):
        """Test removing engines."""
        add_engine("temp", FakeEngine())
        assert remove_engine("temp") is True
        assert remove_engine("temp") is False
        assert get_engine("temp") == (None, False)

    def test_engine_reads_config(self):
        """Test an engine configured through a sub config."""
        add_engine("fake", FakeEngine())
        engine, _ = get_engine("fake")
        engine.init(parse_string('view { base_dir = "/srv/views" }'), "/default")
        assert engine.base_dir == "/srv/views"
