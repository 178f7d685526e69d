"""Exceptions for treeconf."""


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileError(ConfigError):
    """Error reading or writing a configuration file."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ConfigValueError(ConfigError):
    """Invalid argument passed to a configuration operation."""

    pass


class ConfigParseError(ConfigError):
    """Malformed configuration text.

    Attributes:
        line: 1-based line of the offending token (0 when unknown)
        column: 1-based column of the offending token (0 when unknown)
        fragment: Source line the error was found on
        source_name: Name of the parsed source (file path or "<string>")
    """

    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        fragment: str = "",
        source_name: str = "<string>",
    ):
        self.reason = message
        self.line = line
        self.column = column
        self.fragment = fragment
        self.source_name = source_name
        if line:
            message = f"{source_name}:{line}:{column}: {message}"
            if fragment:
                message = f"{message} (near '{fragment.strip()}')"
        super().__init__(message)


class TypeConflictError(ConfigError):
    """Incompatible node kinds met at the same key path."""

    def __init__(self, key: str, source_kind, target_kind):
        self.key = key
        self.source_kind = source_kind
        self.target_kind = target_kind
        super().__init__(
            f"type conflict at '{key}': source ({source_kind.value}) and target ({target_kind.value})"
        )


class ProfileNotFoundError(ConfigError):
    """Profile name does not resolve to a section."""

    def __init__(self, profile: str):
        self.profile = profile
        super().__init__(f"profile doesn't exists: {profile}")


class EngineRegistryError(ConfigError):
    """Invalid rendering engine registration."""

    pass
