"""Loading configuration sources into Config objects."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .config import Config
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import ConfigParseError
from .exceptions import ConfigValueError
from .models import Node
from .parser import parse
from .tree import Tree

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def parse_string(text: str, *, base_dir: str | Path | None = None, source_name: str = "<string>") -> Config:
    """Parse HOCON-like configuration text.

    Args:
        text: Configuration text
        base_dir: Directory for resolving include statements (cwd when None)
        source_name: Name used in error messages

    Returns:
        Config wrapping the parsed tree

    Raises:
        ConfigParseError: If the text is malformed
    """
    return Config(parse(text, source_name, base_dir))


def parse_json(text: str, *, source_name: str = "<string>") -> Config:
    """Parse a JSON document whose root is an object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        fragment = text.split("\n")[e.lineno - 1] if e.lineno else ""
        raise ConfigParseError(e.msg, e.lineno, e.colno, fragment, source_name) from e
    return _from_document(data, source_name)


def parse_yaml(text: str, *, source_name: str = "<string>") -> Config:
    """Parse a YAML document whose root is a mapping (or empty)."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is None:
            raise ConfigParseError(str(e), source_name=source_name) from e
        lines = text.split("\n")
        fragment = lines[mark.line] if mark.line < len(lines) else ""
        raise ConfigParseError(
            getattr(e, "problem", None) or str(e), mark.line + 1, mark.column + 1, fragment, source_name
        ) from e
    return _from_document({} if data is None else data, source_name)


def load_file(path: str | Path) -> Config:
    """Load one configuration file.

    The format is picked by extension: .json, .yaml/.yml, anything else is
    read as HOCON-like text. Include statements resolve relative to the
    file's directory.

    Args:
        path: File to load

    Returns:
        Config wrapping the file's tree

    Raises:
        ConfigFileError: If the file does not exist or cannot be read
        ConfigParseError: If the file is malformed or not UTF-8 text
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(f"does not exists: {path}", path=str(path)) from e
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"{path}: not valid UTF-8 text: {e.reason}", source_name=str(path)) from e

    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        cfg = parse_json(text, source_name=str(path))
    elif suffix in YAML_SUFFIXES:
        cfg = parse_yaml(text, source_name=str(path))
    else:
        cfg = parse_string(text, base_dir=path.parent, source_name=str(path))

    logger.debug(f"Loaded configuration from {path}")
    return cfg


def load_files(*paths: str | Path) -> Config:
    """Load several files, merging each into the first in order.

    Later files override earlier ones key by key; sections are merged
    recursively.

    Raises:
        ConfigValueError: If no path is given
        ConfigFileError: If a file does not exist or cannot be read
        ConfigParseError: If a file is malformed
        TypeConflictError: If two files disagree on whether a key is a section
    """
    if not paths:
        raise ConfigValueError("no configuration files given")

    cfg = load_file(paths[0])
    for path in paths[1:]:
        cfg.merge(load_file(path))
        logger.debug(f"Merged configuration from {path}")
    return cfg


def write_file(cfg: Config, path: str | Path) -> None:
    """Write the whole tree as JSON (.json) or YAML (anything else).

    Parent directories are created as needed.

    Raises:
        ConfigFileError: If writing fails
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in JSON_SUFFIXES:
                f.write(cfg.to_json(indent=2))
                f.write("\n")
            else:
                yaml.safe_dump(cfg.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise ConfigFileError(f"Failed to write configuration to {path}: {e}", path=str(path)) from e
    logger.debug(f"Wrote configuration to {path}")


def _from_document(data: Any, source_name: str) -> Config:
    if not isinstance(data, dict):
        raise ConfigParseError(
            f"{source_name}: document root must be a mapping, got {type(data).__name__}", source_name=source_name
        )
    try:
        root = Node.from_value(data)
    except ConfigError as e:
        raise ConfigParseError(f"{source_name}: {e}", source_name=source_name) from e
    return Config(Tree(root))
