"""Configuration loading and management for Code Styler.

Configuration sources are merged in priority order:
    1. Defaults (defined in StylerConfig)
    2. Global config (~/.code-styler.toml)
    3. Project config (./.code-styler.toml)
    4. Explicit config file (--config)
    5. Environment variables (CODE_STYLER_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(target_branch="develop")
    >>> config.target_branch
    'develop'
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .exceptions import ConfigFileError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

DIFF_SOURCES = ("staged", "branch", "combined")

GLOBAL_CONFIG_NAME = ".code-styler.toml"
PROJECT_CONFIG_NAME = ".code-styler.toml"
ENV_PREFIX = "CODE_STYLER_"

DEFAULT_FORMATTER_PATTERN = r"^(?P<path>[^:\n]+?):(?P<line>\d+):(?P<column>\d+):\s*(?P<message>.+?)\s*$"


@dataclass(frozen=True)
class StylerConfig:
    """Configuration for a Code Styler run.

    Attributes:
        Change collection:
            target_branch: Branch the current work is compared against
            diff_source: "staged", "branch" or "combined" (staged + branch)
            exclude_paths: Paths never diffed. Entries containing "/" match
                as prefixes, other entries match a single path component.

        Checkers:
            image_extensions: File suffixes reported by the image checker
            formatter_command: Linter command line; the file path is appended.
                Disabled when empty.
            formatter_extensions: File suffixes handed to the linter
            formatter_exclude: File names the linter skips
            formatter_pattern: Regex with path/line/column/message groups
            enable_documentation: Run the docstring checker
            documentation_extensions: File suffixes the docstring checker reads

        Transport:
            transport_host: Host the receiver listens on
            transport_port: Port the receiver listens on
            send_timeout_seconds: How long a sender retries the connection

        Output control:
            verbosity: Logging verbosity level
    """

    target_branch: str = "master"
    diff_source: str = "combined"
    exclude_paths: list[str] = field(default_factory=list)

    image_extensions: list[str] = field(default_factory=lambda: [".jpg", ".jpeg"])
    formatter_command: str = ""
    formatter_extensions: list[str] = field(default_factory=lambda: [".py"])
    formatter_exclude: list[str] = field(default_factory=list)
    formatter_pattern: str = DEFAULT_FORMATTER_PATTERN
    enable_documentation: bool = True
    documentation_extensions: list[str] = field(default_factory=lambda: [".py"])

    transport_host: str = "127.0.0.1"
    transport_port: int = 48123
    send_timeout_seconds: float = 10.0

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name, type_hint in get_type_hints(type(self)).items():
            value = getattr(self, name)
            problem = _type_problem(value, type_hint)
            if problem is not None:
                raise InvalidConfigError(name, value, problem)

        if not self.target_branch.strip():
            raise InvalidConfigError("target_branch", self.target_branch, "must not be empty")
        if self.diff_source not in DIFF_SOURCES:
            raise InvalidConfigError(
                "diff_source", self.diff_source, f"must be one of {', '.join(DIFF_SOURCES)}"
            )
        if not 0 < self.transport_port < 65536:
            raise InvalidConfigError("transport_port", self.transport_port, "must be in 1..65535")
        if self.send_timeout_seconds < 0:
            raise InvalidConfigError(
                "send_timeout_seconds", self.send_timeout_seconds, "must be non-negative"
            )
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "must be quiet, normal or verbose")
        for key in ("image_extensions", "formatter_extensions", "documentation_extensions"):
            for suffix in getattr(self, key):
                if not suffix.startswith("."):
                    raise InvalidConfigError(key, suffix, "extensions must start with '.'")
        try:
            pattern = re.compile(self.formatter_pattern)
        except re.error as e:
            raise InvalidConfigError("formatter_pattern", self.formatter_pattern, str(e)) from e
        if not {"line", "message"} <= set(pattern.groupindex):
            raise InvalidConfigError(
                "formatter_pattern", self.formatter_pattern, "needs 'line' and 'message' groups"
            )

    @property
    def formatter_enabled(self) -> bool:
        return bool(self.formatter_command.strip())


def load_config(config_file: Optional[Path] = None, **overrides) -> StylerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep file values.

    Returns:
        Validated StylerConfig instance

    Raises:
        ConfigFileError: If a config file is missing or unparseable
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists() and project_config != global_config:
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigFileError(config_file, "file not found")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(merged) - set(StylerConfig.__dataclass_fields__))
    if unknown:
        raise InvalidConfigError(unknown[0], merged[unknown[0]], "unknown configuration key")

    return StylerConfig(**merged)


def _type_problem(value: Any, type_hint: Any) -> Optional[str]:
    """Describe why ``value`` does not fit ``type_hint``, or None when it does.

    TOML and keyword overrides are untyped, so every field is checked before
    the value checks in ``__post_init__`` run.
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return None
        return "expected a list of strings"

    # bool is an int subclass, so it is ruled out explicitly for numbers.
    if type_hint is bool:
        return None if isinstance(value, bool) else "expected true or false"
    if type_hint is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return None
        return "expected an integer"
    if type_hint is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return None
        return "expected a number"

    if type_hint is str or origin is Literal:
        return None if isinstance(value, str) else "expected a string"

    return None


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODE_STYLER_* environment variables.

    List fields take comma-separated values, e.g.
    ``CODE_STYLER_EXCLUDE_PATHS=generated/,Localization.py``.
    """
    type_hints = get_type_hints(StylerConfig)

    result: dict[str, Any] = {}

    for field_name in StylerConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file, accepting either top-level keys or a [code-styler] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, str(e))

    section = data.get("code-styler")
    if isinstance(section, dict):
        return section
    return data
