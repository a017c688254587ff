"""Connection settings for the Solr index and the holdings service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from NeosCatalog.config.common import (
    expect_float,
    expect_int,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)

SOLR_URL_ENV = "SOLR_URL"
HOLDINGS_URL_ENV = "HOLDINGS_URL"


@dataclass(frozen=True, slots=True)
class SolrConfig:
    """Store validated Solr connection settings."""

    url: str
    collection: str
    select_path: str
    document_path: str
    timeout: float
    max_attempts: int


@dataclass(frozen=True, slots=True)
class HoldingsConfig:
    """Store validated holdings service connection settings."""

    url: str
    timeout: float
    max_attempts: int


def load_solr(raw: Mapping[str, Any]) -> SolrConfig:
    """Load solr domain config from raw mapping.

    ``SOLR_URL`` in the environment overrides ``solr.url``.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed Solr configuration.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "solr", required=True)
    url = expect_str(get_required_value(section, "url", "solr.url"), "solr.url")
    return SolrConfig(
        url=_env_override(SOLR_URL_ENV, url),
        collection=expect_str(get_optional_value(section, "collection", "blacklight-core"), "solr.collection"),
        select_path=expect_str(get_optional_value(section, "select_path", "select"), "solr.select_path"),
        document_path=expect_str(get_optional_value(section, "document_path", "select"), "solr.document_path"),
        timeout=expect_float(get_optional_value(section, "timeout", 10.0), "solr.timeout"),
        max_attempts=expect_int(get_optional_value(section, "max_attempts", 3), "solr.max_attempts"),
    )


def load_holdings(raw: Mapping[str, Any]) -> HoldingsConfig:
    """Load holdings domain config from raw mapping.

    ``HOLDINGS_URL`` in the environment overrides ``holdings.url``.
    """
    section = get_section(raw, "holdings", required=True)
    url = expect_str(get_required_value(section, "url", "holdings.url"), "holdings.url")
    return HoldingsConfig(
        url=_env_override(HOLDINGS_URL_ENV, url),
        timeout=expect_float(get_optional_value(section, "timeout", 10.0), "holdings.timeout"),
        max_attempts=expect_int(get_optional_value(section, "max_attempts", 2), "holdings.max_attempts"),
    )


def check_solr(config: SolrConfig) -> None:
    """Validate solr domain constraints.

    Raises:
        ValueError: If values violate Solr constraints.
    """
    _check_url(config.url, "solr.url")
    if not config.collection.strip():
        raise ValueError("solr.collection must not be empty")
    if config.timeout <= 0:
        raise ValueError("solr.timeout must be positive")
    if config.max_attempts <= 0:
        raise ValueError("solr.max_attempts must be positive")


def check_holdings(config: HoldingsConfig) -> None:
    """Validate holdings domain constraints."""
    _check_url(config.url, "holdings.url")
    if config.timeout <= 0:
        raise ValueError("holdings.timeout must be positive")
    if config.max_attempts <= 0:
        raise ValueError("holdings.max_attempts must be positive")


def _check_url(value: str, config_key: str) -> None:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"{config_key} must be an http(s) URL")


def _env_override(env_name: str, configured: str) -> str:
    """Return the environment value when set, otherwise the configured one."""
    return os.getenv(env_name, "").strip() or configured
