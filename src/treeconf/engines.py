"""Process-wide registry of named rendering engines.

Templating components register their engines at startup and look them up
by name afterwards. Engines are opaque to this library; they usually read
their settings through ``Config.get_sub_config``.
"""

import logging
import threading
from typing import Any

from .exceptions import EngineRegistryError

logger = logging.getLogger(__name__)

_engines: dict[str, Any] = {}
_lock = threading.Lock()


def add_engine(name: str, engine: Any) -> None:
    """Register an engine under name.

    Raises:
        EngineRegistryError: If name is taken or engine is None
    """
    if engine is None:
        raise EngineRegistryError("engine value is nil")

    with _lock:
        if name in _engines:
            raise EngineRegistryError(f"engine name '{name}' is already added")
        _engines[name] = engine
    logger.debug(f"Registered engine '{name}'")


def get_engine(name: str) -> tuple[Any | None, bool]:
    """Look up an engine.

    Returns:
        (engine, True), or (None, False) if no engine has that name
    """
    with _lock:
        engine = _engines.get(name)
    return engine, engine is not None


def remove_engine(name: str) -> bool:
    """Unregister an engine.

    Returns:
        True if removed, False if not registered
    """
    with _lock:
        return _engines.pop(name, None) is not None


def engine_names() -> list[str]:
    """Registered engine names, in registration order."""
    with _lock:
        return list(_engines)
