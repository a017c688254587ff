"""``log`` section: console level and optional log file mirroring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from NeosCatalog.config.common import (
    expect_bool,
    expect_str,
    get_optional_value,
    get_section,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Logging settings passed to ``configure_logging``.

    Attributes:
        level: Console level name, upper-cased.
        to_file: Mirror logs into ``dir/<action>/``.
        dir: Base directory of mirrored log files.
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "log"


def load_runtime(raw: Mapping[str, Any]) -> RuntimeConfig:
    """Read the optional ``log`` section.

    Raises:
        TypeError: If a value has the wrong type.
    """
    section = get_section(raw, "log", required=False)
    base = RuntimeConfig()
    return RuntimeConfig(
        level=expect_str(get_optional_value(section, "level", base.level), "log.level").strip().upper(),
        to_file=expect_bool(get_optional_value(section, "to_file", base.to_file), "log.to_file"),
        dir=expect_str(get_optional_value(section, "dir", base.dir), "log.dir"),
    )


def check_runtime(config: RuntimeConfig) -> None:
    """Raise ValueError for an unknown level or an empty log directory."""
    if config.level not in LOG_LEVELS:
        raise ValueError(f"log.level must be one of {list(LOG_LEVELS)}")
    if config.to_file and not config.dir.strip():
        raise ValueError("log.dir must not be empty when log.to_file is true")
