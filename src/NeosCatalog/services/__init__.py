"""Catalog service layer for NeosCatalog.

Provides the search/show application service and the factory wiring it to
the configured Solr index and holdings service.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from NeosCatalog.core.brand import BrandResolver
from NeosCatalog.core.enrich import RecordEnricher
from NeosCatalog.services.catalog import (
    CatalogService,
    DetailView,
    HoldingsProvider,
    RecordIndex,
    SearchPage,
)

if TYPE_CHECKING:
    from NeosCatalog.config import AppConfig


def create_catalog_service(config: AppConfig) -> CatalogService:
    """Create a catalog service with configured collaborators.

    Args:
        config: Application configuration.

    Returns:
        Configured CatalogService instance.
    """
    from NeosCatalog.sources.holdings.source import HoldingsService
    from NeosCatalog.sources.solr.source import SolrIndex

    return CatalogService(
        config=config.search,
        index=SolrIndex.from_config(config.solr),
        holdings=HoldingsService.from_config(config.holdings),
        brands=BrandResolver.from_config(config.libraries),
        enricher=RecordEnricher(title_field=config.search.defaults.title_field),
    )


__all__ = [
    "CatalogService",
    "DetailView",
    "HoldingsProvider",
    "RecordIndex",
    "SearchPage",
    "create_catalog_service",
]
