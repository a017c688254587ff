"""JSON renderers.

Turns search pages, detail views and the search configuration into
JSON-serializable objects for the CLI.
"""

from __future__ import annotations

import json
from typing import Any

from NeosCatalog.config.search import SearchConfig
from NeosCatalog.core.brand import RequestContext
from NeosCatalog.core.models import EnrichedRecord, FacetResult, HoldingEntry
from NeosCatalog.services.catalog import DetailView, SearchPage


def render_search_page(page: SearchPage, config: SearchConfig) -> dict[str, Any]:
    """Render a list-view page.

    Each record is reduced to its id, title and the configured index fields
    present on it, in configured order.
    """
    title_field = config.defaults.title_field
    records = []
    for record in page.result.records:
        fields = [
            {"label": item.label, "value": record[item.field_key]}
            for item in config.list_fields
            if record.get(item.field_key) not in (None, "", [])
        ]
        records.append({"id": record.get("id"), "title": record.get(title_field), "fields": fields})

    result = page.result
    return {
        "library": render_context(page.context),
        "query": page.request.query,
        "total": result.total,
        "page": result.page,
        "total_pages": result.total_pages,
        "records": records,
        "facets": [render_facet(facet) for facet in result.facets],
        "suggestions": list(result.suggestions),
    }


def render_detail(view: DetailView, config: SearchConfig) -> dict[str, Any]:
    """Render a detail-view record with its configured show fields."""
    record = view.record
    d: dict[str, Any] = {
        "library": render_context(view.context),
        "id": record.id,
        "title": record.title,
        "fields": _show_fields(record, config),
        "holdings": [render_holding(entry) for entry in record.holdings],
        "holdable": record.holdable,
        "bookable": record.bookable,
    }

    # Optional derivations are emitted only when the record carries them.
    if record.fulltext_urls is not None:
        d["fulltext_urls"] = list(record.fulltext_urls)
    if record.subjects is not None:
        d["subjects"] = [list(chain) for chain in record.subjects]
    if record.additional_authors is not None:
        d["additional_authors"] = list(record.additional_authors)
    if record.holdings_error:
        d["holdings_error"] = record.holdings_error
    return d


def render_context(context: RequestContext) -> dict[str, str]:
    return {
        "id": context.brand.brand_id,
        "name": context.library_name,
        "url": context.home_url,
        "portal_url": context.portal_url,
    }


def render_facet(facet: FacetResult) -> dict[str, Any]:
    d: dict[str, Any] = {"field": facet.field_key, "label": facet.label}
    if facet.bounds is not None:
        d["min"], d["max"] = facet.bounds
    else:
        d["items"] = [{"value": item.value, "count": item.count} for item in facet.items]
        d["more"] = facet.has_more
    return d


def render_holding(entry: HoldingEntry) -> dict[str, Any]:
    return {
        "location": entry.location,
        "holdable": entry.holdable,
        "bookable": entry.bookable,
        **dict(entry.extra),
    }


def render_config(config: SearchConfig) -> dict[str, Any]:
    """Summarize the search configuration for ``check-config``."""
    defaults = config.defaults
    default_sort = config.default_sort
    return {
        "page_size": defaults.page_size,
        "spell_max": defaults.spell_suggest_max_results,
        "autocomplete": defaults.autocomplete_path if defaults.autocomplete_enabled else None,
        "facets": [facet.field_key for facet in config.facets],
        "index_fields": len(config.list_fields),
        "show_fields": len(config.show_fields),
        "search_fields": [item.key for item in config.search_fields],
        "sorts": [sort.label for sort in config.sorts.sorts],
        "default_sort": default_sort.sort_key if default_sort else None,
    }


def dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def _show_fields(record: EnrichedRecord, config: SearchConfig) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for item in config.show_fields:
        value = record.fields.get(item.field_key)
        if value in (None, "", []):
            continue
        if item.separator is not None and isinstance(value, list):
            value = item.separator.join(str(v) for v in value)
        rows.append({"label": item.label, "value": value})
    return rows
