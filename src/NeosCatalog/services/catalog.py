"""Catalog service: list-view search and detail-view enrichment."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Protocol, Sequence

from NeosCatalog.config.search import SearchConfig
from NeosCatalog.core.brand import BrandResolver, RequestContext
from NeosCatalog.core.enrich import RecordEnricher
from NeosCatalog.core.errors import DataError, NotFoundError
from NeosCatalog.core.models import EnrichedRecord, HoldingEntry, RawRecord, SearchResult
from NeosCatalog.core.query import SearchRequest
from NeosCatalog.utils.log import log


class RecordIndex(Protocol):
    """Protocol for the external search index."""

    name: str

    def search(self, config: SearchConfig, request: SearchRequest) -> SearchResult:
        """Run a list-view search."""
        raise NotImplementedError

    def fetch_record(self, record_id: str) -> RawRecord:
        """Fetch one record; raise NotFoundError when it does not exist."""
        raise NotImplementedError

    def advanced_form(self, config: SearchConfig) -> SearchResult:
        """Fetch facet values for the advanced-search form."""
        raise NotImplementedError

    def suggest(self, path: str, prefix: str) -> Sequence[str]:
        """Return autocomplete terms for ``prefix`` from handler ``path``."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by the index."""
        raise NotImplementedError


class HoldingsProvider(Protocol):
    """Protocol for the external holdings/availability service."""

    name: str

    def items(self, record_id: str) -> Sequence[HoldingEntry]:
        """Return holdings of a record in service order."""
        raise NotImplementedError

    def links(self, record_id: str) -> Sequence[str]:
        """Return full-text URLs of a record."""
        raise NotImplementedError

    def close(self) -> None:
        """Close resources held by the service."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class SearchPage:
    """List-view payload handed to presentation."""

    context: RequestContext
    request: SearchRequest
    result: SearchResult


@dataclass(frozen=True, slots=True)
class DetailView:
    """Detail-view payload handed to presentation."""

    context: RequestContext
    record: EnrichedRecord


@dataclass(slots=True)
class CatalogService:
    """Application service behind the catalog's search and record pages.

    Holds only shared, read-only collaborators; everything request specific is
    created per call and returned to the caller.
    """

    config: SearchConfig
    index: RecordIndex
    holdings: HoldingsProvider
    brands: BrandResolver
    enricher: RecordEnricher = field(default_factory=RecordEnricher)

    def context(self, brand_hint: str | None) -> RequestContext:
        """Resolve the request context for ``brand_hint``.

        Raises:
            NotFoundError: If the hint is unknown and the brand policy is ``error``.
        """
        return self.brands.context_for(brand_hint)

    def search(self, request: SearchRequest, *, brand_hint: str | None = None) -> SearchPage:
        """Run a list-view search.

        Raises:
            NotFoundError: On unknown brand, search field or sort.
            UpstreamError: If the index fails.
        """
        context = self.context(brand_hint)
        result = self.index.search(self.config, request)
        log.info(
            "Search completed: q=%r field=%s total=%d page=%d",
            request.query,
            request.search_field or "default",
            result.total,
            request.page,
        )
        return SearchPage(context=context, request=request, result=result)

    def show(self, record_id: str, *, brand_hint: str | None = None) -> DetailView:
        """Fetch and enrich one record for the detail page.

        Malformed holdings do not fail the page: they are logged and the record
        is returned without holdings and with ``holdings_error`` set. A malformed
        links reply only drops the links; the record then falls back to the
        URLs of its own full-text field.

        Raises:
            NotFoundError: On unknown brand or record.
            UpstreamError: If the index or the holdings service fails.
        """
        context = self.context(brand_hint)
        record = self.index.fetch_record(record_id)

        links = None
        if self.enricher.needs_links(record):
            try:
                links = self.holdings.links(record_id)
            except DataError as error:
                log.warning("Ignoring full-text links for record=%s: %s", record_id, error)

        try:
            holdings = self.holdings.items(record_id)
            enriched = self.enricher.enrich(record, holdings, links=links)
        except DataError as error:
            log.warning("Omitting holdings for record=%s: %s", record_id, error)
            enriched = replace(self.enricher.enrich(record, (), links=links), holdings_error=str(error))

        log.debug("Record enriched: id=%s holdings=%d", record_id, len(enriched.holdings))
        return DetailView(context=context, record=enriched)

    def advanced_form(self, *, brand_hint: str | None = None) -> SearchPage:
        """Fetch facet values shown on the advanced-search form."""
        context = self.context(brand_hint)
        result = self.index.advanced_form(self.config)
        return SearchPage(context=context, request=SearchRequest(advanced=True), result=result)

    def suggest(self, prefix: str) -> tuple[str, ...]:
        """Return autocomplete suggestions for ``prefix``.

        Raises:
            NotFoundError: If autocomplete is disabled.
        """
        defaults = self.config.defaults
        if not defaults.autocomplete_enabled:
            raise NotFoundError("Autocomplete is disabled")
        if not prefix.strip():
            return ()
        return tuple(self.index.suggest(defaults.autocomplete_path, prefix.strip()))

    def close(self) -> None:
        """Close the index and holdings collaborators."""
        for collaborator in (self.index, self.holdings):
            close_func = getattr(collaborator, "close", None)
            if callable(close_func):
                try:
                    close_func()
                except Exception as error:  # noqa: BLE001 - close failure must be isolated
                    log.warning("Close failed: %s error=%s", getattr(collaborator, "name", "unknown"), error)

    def __enter__(self) -> CatalogService:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
