"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib


@dataclass(frozen=True)
class FormatOptions:
    """Options controlling a single formatting run.

    Attributes:
        tab_size: Width of one indentation level in columns.
        insert_spaces: Indent with runs of spaces when True, with one tab per
            level otherwise.
        preserve_newlines: Whether blank-line runs are kept (and capped at
            `max_preserve_newlines`).
        max_preserve_newlines: Largest number of consecutive blank lines kept.
        wrap_line_length: Soft wrap hint; read and validated but not enforced.

    Examples:
        FormatOptions(tab_size=2, max_preserve_newlines=1)
    """

    # Indentation
    tab_size: int = 4
    insert_spaces: bool = True

    # Blank lines
    preserve_newlines: bool = True
    max_preserve_newlines: int = 2

    # Wrapping
    wrap_line_length: int = 120

    @property
    def indent_unit(self) -> str:
        """Text emitted for one indentation level."""
        return " " * self.tab_size if self.insert_spaces else "\t"


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`tab_size` must be a positive integer")
    """


def load_config(search_path: Path) -> FormatOptions:
    """Load options from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.jsp-format]`` table from `pyproject.toml` and the
    ``[jsp-format]`` or ``[tool.jsp-format]`` table from `.jsp-format.toml`
    when present. TOML files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatOptions: Loaded options, or defaults when no configuration exists.

    Raises:
        ConfigError: If a matching table is not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("src/main/webapp"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "jsp-format")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".jsp-format.toml",
            table_paths=[("jsp-format",), ("tool", "jsp-format")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FormatOptions()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> FormatOptions | None:
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
        return _build_options_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_options_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FormatOptions:
    table_display = ".".join(table_path)

    if raw_config is None:
        return FormatOptions()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # Accept the kebab-case spelling common in TOML files.
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}

    try:
        return FormatOptions(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_options(options: FormatOptions) -> None:
    """Validate a `FormatOptions` instance.

    Args:
        options: Options to validate.

    Raises:
        ConfigError: If a numeric field has the wrong type or range, or a flag
            is not a boolean.

    Examples:
        validate_options(FormatOptions(tab_size=2))
    """
    _ensure_integers(
        {
            "tab_size": options.tab_size,
            "max_preserve_newlines": options.max_preserve_newlines,
            "wrap_line_length": options.wrap_line_length,
        }
    )
    _ensure_booleans(
        {
            "insert_spaces": options.insert_spaces,
            "preserve_newlines": options.preserve_newlines,
        }
    )

    _ensure_positive(
        {
            "tab_size": options.tab_size,
            "wrap_line_length": options.wrap_line_length,
        }
    )
    if options.max_preserve_newlines < 0:
        raise ConfigError("`max_preserve_newlines` must be >= 0")


def apply_overrides(options: FormatOptions, **overrides: object) -> FormatOptions:
    """Apply override values to `FormatOptions`.

    Args:
        options: Base options to update.
        overrides: Override values keyed by field name; values set to None
            are ignored.

    Returns:
        FormatOptions: New options with the overrides applied, or `options`
        itself when nothing changes.

    Raises:
        TypeError: If an override name is not defined on `FormatOptions`.

    Examples:
        updated = apply_overrides(options, tab_size=2, insert_spaces=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return options
    return replace(options, **changes)


def build_options(search_path: Path, **overrides: object) -> FormatOptions:
    """Load, override, and validate options.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by field name; None values are ignored.

    Returns:
        FormatOptions: Validated options ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        options = build_options(Path.cwd(), tab_size=2)
    """
    options = load_config(search_path)
    options = apply_overrides(options, **overrides)
    validate_options(options)
    return options


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")
