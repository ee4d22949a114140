"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

OUTPUT_FORMATS = ("text", "json")


@dataclass
class FormatterConfig:
    """Configuration for replaying text through the streaming formatter.

    Attributes:
        chunk_size: Number of characters per delta when splitting plain text.
        output_format: Output rendering, ``"text"`` (markdown) or ``"json"``.
        resolve_paths: Whether JSON output includes absolute code block paths.
        finish_stream: Whether the replayed stream is finished before output.
        max_file_size: Maximum input file size in bytes that will be processed.

    Examples:
        FormatterConfig(chunk_size=4, output_format="json")
    """

    # Replay
    chunk_size: int = 16
    finish_stream: bool = True

    # Output
    output_format: str = "text"
    resolve_paths: bool = False

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`chunk_size` must be a positive integer")
    """


def load_config(search_path: Path) -> FormatterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.streaming-formatter]`` table from `pyproject.toml` and the
    ``[streaming-formatter]`` or ``[tool.streaming-formatter]`` table from
    `.streaming-formatter.toml` when present. Returns default values when no
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
        load_config(Path("transcripts"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "streaming-formatter")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".streaming-formatter.toml",
            table_paths=[("streaming-formatter",), ("tool", "streaming-formatter")],
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

    # TOML keys are written with dashes or underscores.
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return FormatterConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: FormatterConfig) -> FormatterConfig:
    output_format = config.output_format
    if isinstance(output_format, str):
        output_format = output_format.strip().lower()
    return replace(config, output_format=output_format)


def validate_config(config: FormatterConfig) -> None:
    """Validate a `FormatterConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If numeric limits are not positive integers, flags are not
            booleans, or the output format is unsupported.

    Examples:
        validate_config(FormatterConfig(chunk_size=8))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "chunk_size": config.chunk_size,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "chunk_size": config.chunk_size,
            "max_file_size": config.max_file_size,
        }
    )

    if config.output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"`output_format` must be one of: {', '.join(OUTPUT_FORMATS)}")
    if not isinstance(config.resolve_paths, bool):
        raise ConfigError("`resolve_paths` must be a boolean")
    if not isinstance(config.finish_stream, bool):
        raise ConfigError("`finish_stream` must be a boolean")


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
        updated = apply_overrides(config, chunk_size=4, output_format="json")
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
        FormatterConfig: Validated configuration ready for replay.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), chunk_size=8)
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
