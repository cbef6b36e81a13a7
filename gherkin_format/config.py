"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

@dataclass
class FormatterConfig:
    """Configuration for formatting feature documents.

    Attributes:
        indent_width: Number of spaces emitted per nesting level.
        table_indent_level: Nesting level used as the left margin of table rows.
        extensions: File extensions routed to the formatter.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        FormatterConfig(indent_width=4)
    """

    # Layout
    indent_width: int = 2
    table_indent_level: int = 3

    # Routing
    extensions: tuple[str, ...] = (".feature", ".gherkin")

    # Limits
    max_file_size: int = 10 * 1024 * 1024

    @property
    def table_margin(self) -> str:
        """Left margin written before every aligned table row."""
        return " " * (self.indent_width * self.table_indent_level)


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`indent_width` must be a positive integer")
    """


def load_config(search_path: Path) -> FormatterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.gherkin-format]`` table from `pyproject.toml` and the
    ``[gherkin-format]`` or ``[tool.gherkin-format]`` table from
    `.gherkin-format.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatterConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("features"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "gherkin-format")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".gherkin-format.toml",
            table_paths=[("gherkin-format",), ("tool", "gherkin-format")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FormatterConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> FormatterConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FormatterConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return FormatterConfig()

    try:
        return FormatterConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: FormatterConfig) -> FormatterConfig:
    """Coerce loosely typed values (TOML arrays, bare extensions) into canonical form."""
    extensions = config.extensions
    if isinstance(extensions, str):
        extensions = (extensions,)
    if isinstance(extensions, (list, tuple)):
        extensions = tuple(
            (ext if ext.startswith(".") else f".{ext}").lower() if isinstance(ext, str) else ext
            for ext in extensions
        )
    return replace(config, extensions=extensions)


def validate_config(config: FormatterConfig) -> None:
    """Validate a `FormatterConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If layout values or limits are not positive integers, or
            the extension list is empty or malformed.

    Examples:
        validate_config(FormatterConfig(indent_width=4))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "indent_width": config.indent_width,
            "table_indent_level": config.table_indent_level,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "indent_width": config.indent_width,
            "max_file_size": config.max_file_size,
        }
    )
    if config.table_indent_level < 0:
        raise ConfigError("`table_indent_level` must be >= 0")

    if not isinstance(config.extensions, tuple) or not config.extensions:
        raise ConfigError("`extensions` must be a non-empty list of file extensions")
    for extension in config.extensions:
        if not isinstance(extension, str) or extension == ".":
            raise ConfigError("`extensions` entries must be non-empty strings")


def apply_overrides(config: FormatterConfig, **overrides: object) -> FormatterConfig:
    """Apply override values to a `FormatterConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FormatterConfig: New configuration with the provided overrides applied.
        The original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FormatterConfig`.

    Examples:
        updated = apply_overrides(config, indent_width=4)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatterConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FormatterConfig: Validated configuration ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), indent_width=4)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
