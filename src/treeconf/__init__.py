"""treeconf: hierarchical configuration with profiles and multi-file merging.

This library reads a HOCON-like configuration format (plus JSON and YAML)
into a tree of sections, lists and scalars, and provides:
- Typed access by dotted path (``prod.db.port``)
- Profile overlays: ``<profile>.<key>`` shadows ``<key>`` while a profile
  is active, globals stay visible for keys the profile does not define
- Key-wise merging of several sources, later sources overriding earlier ones
- JSON and YAML serialization of the whole tree

Public API:
    Config: Typed, profile-aware facade over a configuration tree
    Tree: Dotted-path tree with recursive merge
    Node, NodeKind: Tagged configuration values
    ProfileResolver: Profile overlay lookup
    parse_string, parse_json, parse_yaml: Parse text sources
    load_file, load_files, write_file: File I/O
    add_engine, get_engine: Process-wide rendering engine registry
    ConfigError and subclasses: Exception types

Example:
    ```python
    from treeconf import load_files

    # Later files override earlier ones
    cfg = load_files("app.cfg", "app.local.cfg")

    # Read global values
    port = cfg.get_int_default("server.port", 8080)

    # Switch to the "prod" section as an overlay
    cfg.set_profile("prod")
    host, found = cfg.get_string("server.host")
    ```
"""

from .config import Config
from .engines import add_engine
from .engines import engine_names
from .engines import get_engine
from .engines import remove_engine
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import ConfigParseError
from .exceptions import ConfigValueError
from .exceptions import EngineRegistryError
from .exceptions import ProfileNotFoundError
from .exceptions import TypeConflictError
from .loader import load_file
from .loader import load_files
from .loader import parse_json
from .loader import parse_string
from .loader import parse_yaml
from .loader import write_file
from .models import Node
from .models import NodeKind
from .profile import ProfileResolver
from .tree import Tree

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Tree",
    "Node",
    "NodeKind",
    "ProfileResolver",
    "parse_string",
    "parse_json",
    "parse_yaml",
    "load_file",
    "load_files",
    "write_file",
    "add_engine",
    "get_engine",
    "remove_engine",
    "engine_names",
    "ConfigError",
    "ConfigFileError",
    "ConfigParseError",
    "ConfigValueError",
    "EngineRegistryError",
    "ProfileNotFoundError",
    "TypeConflictError",
]
