from __future__ import annotations

"""Root catalog configuration: YAML layering and per-domain assembly."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from NeosCatalog.config.backend import (
    HoldingsConfig,
    SolrConfig,
    check_holdings,
    check_solr,
    load_holdings,
    load_solr,
)
from NeosCatalog.config.brands import LibrariesConfig, check_libraries, load_libraries
from NeosCatalog.config.runtime import RuntimeConfig, check_runtime, load_runtime
from NeosCatalog.config.search import SearchConfig, load_search

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Everything the CLI needs to build a catalog service."""

    runtime: RuntimeConfig
    solr: SolrConfig
    holdings: HoldingsConfig
    libraries: LibrariesConfig
    search: SearchConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Build ``AppConfig`` from a merged mapping.

    Each domain is loaded (type checks) and then checked (value constraints);
    the search registry validates itself while it is built.

    Raises:
        TypeError: If a value has the wrong type.
        ValueError: If a value is missing or violates a constraint.
            ``ConfigurationError`` is a ValueError.
    """
    runtime = load_runtime(raw)
    check_runtime(runtime)
    solr = load_solr(raw)
    check_solr(solr)
    holdings = load_holdings(raw)
    check_holdings(holdings)
    libraries = load_libraries(raw)
    check_libraries(libraries)

    config = AppConfig(
        runtime=runtime,
        solr=solr,
        holdings=holdings,
        libraries=libraries,
        search=load_search(raw),
    )
    check_cross_domain(config)
    return config


def load_config(path: Path) -> AppConfig:
    """Load a single YAML file as the complete configuration."""
    return load_config_with_defaults(path, default_path=path)


def load_config_with_defaults(
    config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH
) -> AppConfig:
    """Load ``default_path`` and merge ``config_path`` over it.

    Mappings merge key by key. Lists (facets, fields, sorts) in the override
    replace the default lists, since their order is display order.
    """
    merged = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path != default_path:
        override = parse_yaml(config_path.read_text(encoding="utf-8"))
        merged = merge_config_dicts(merged, override)
    return parse_config_dict(merged)


def check_cross_domain(config: AppConfig) -> None:
    """Check constraints spanning several search settings.

    Raises:
        ValueError: If a range facet sets a value limit, or the advanced-search
            route collides with the autocomplete handler.
    """
    defaults = config.search.defaults
    for facet in config.search.facets:
        if facet.is_range and facet.limit is not None:
            raise ValueError(f"facets: range facet {facet.field_key} must not set a limit")
    if defaults.advanced_search.url_key == defaults.autocomplete_path:
        raise ValueError("search.advanced_search.url_key must differ from search.autocomplete_path")


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse YAML text; an empty document is an empty mapping."""
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``override`` merged in recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            value = merge_config_dicts(current, value)
        merged[key] = value
    return merged
