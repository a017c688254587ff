from __future__ import annotations

"""Public configuration API for NeosCatalog."""

from NeosCatalog.config.app import (
    AppConfig,
    check_cross_domain,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from NeosCatalog.config.backend import HoldingsConfig, SolrConfig
from NeosCatalog.config.brands import LibrariesConfig
from NeosCatalog.config.fields import (
    FacetFieldDef,
    FacetSort,
    ListFieldDef,
    SearchFieldDef,
    ShowFieldDef,
    SortFieldDef,
)
from NeosCatalog.config.runtime import RuntimeConfig
from NeosCatalog.config.search import (
    AdvancedSearchConfig,
    GlobalQueryDefaults,
    SearchConfig,
    SearchConfigBuilder,
)

__all__ = [
    "RuntimeConfig",
    "SolrConfig",
    "HoldingsConfig",
    "LibrariesConfig",
    "SearchConfig",
    "SearchConfigBuilder",
    "GlobalQueryDefaults",
    "AdvancedSearchConfig",
    "FacetFieldDef",
    "FacetSort",
    "ListFieldDef",
    "ShowFieldDef",
    "SearchFieldDef",
    "SortFieldDef",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
    "check_cross_domain",
]
