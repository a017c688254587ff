"""Compile ``SearchConfig`` + ``SearchRequest`` into Solr request parameters.

Repeated parameters (``fq``, ``facet.field``, ``stats.field``) are emitted as
lists, which ``requests`` encodes as repeated query-string keys.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from NeosCatalog.config.fields import FacetSort
from NeosCatalog.config.search import SearchConfig
from NeosCatalog.core.errors import NotFoundError
from NeosCatalog.core.query import SearchRequest

SolrParams = dict[str, Union[str, list[str]]]

MAX_PER_PAGE = 100


def compile_search_params(config: SearchConfig, request: SearchRequest) -> SolrParams:
    """Build Solr parameters for a list-view search.

    Args:
        config: Built search configuration.
        request: Normalized search request.

    Returns:
        Solr request parameters (without ``wt``).

    Raises:
        NotFoundError: If the request names an unknown search field or sort.
    """
    search_field = config.search_field(request.search_field)
    if search_field is None:
        raise NotFoundError(f"Unknown search field: {request.search_field}")

    rows = page_size(config, request)
    params: SolrParams = {
        "rows": str(rows),
        "start": str((request.page - 1) * rows),
    }

    for name, value in search_field.query_params.items():
        params[name] = _solr_value(value)
    if search_field.query_handler:
        params["qt"] = search_field.query_handler
    if request.advanced:
        params["defType"] = config.defaults.advanced_search.query_parser

    query = request.query.strip()
    if query:
        params["q"] = _local_params(search_field.local_params) + query

    sort = config.sort_field(request.sort)
    if request.sort and sort is None:
        raise NotFoundError(f"Unknown sort: {request.sort}")
    if sort is not None:
        params["sort"] = sort.sort_key

    filters = [_term_filter(field, value) for field, values in request.filters.items() for value in values]
    filters.extend(_range_filter(field, bounds) for field, bounds in request.range_filters.items())
    if filters:
        params["fq"] = filters

    if config.defaults.facet_fields_in_request:
        params.update(compile_facet_params(config))
    return params


def compile_facet_params(config: SearchConfig) -> SolrParams:
    """Build facet parameters for every configured facet.

    The per-field limit is sent as ``limit + 1`` so the parser can tell whether
    a "more" link is needed. Range facets request field statistics instead of
    value counts.
    """
    facet_fields: list[str] = []
    stats_fields: list[str] = []
    params: SolrParams = {}
    for facet in config.facets:
        if facet.is_range:
            stats_fields.append(facet.field_key)
            continue
        facet_fields.append(facet.field_key)
        if facet.limit is not None:
            params[f"f.{facet.field_key}.facet.limit"] = str(facet.limit + 1)
        if facet.sort_mode is not FacetSort.COUNT:
            params[f"f.{facet.field_key}.facet.sort"] = facet.sort_mode.value

    if facet_fields:
        params["facet"] = "true"
        params["facet.field"] = facet_fields
    if stats_fields:
        params["stats"] = "true"
        params["stats.field"] = stats_fields
    return params


def compile_advanced_form_params(config: SearchConfig) -> SolrParams:
    """Build the facet-only request that populates the advanced-search form."""
    params: SolrParams = {"rows": "0"}
    params.update(compile_facet_params(config))
    for name, value in config.defaults.advanced_search.form_params.items():
        params[name] = _solr_value(value)
    return params


def compile_document_params(record_id: str, *, id_field: str = "id") -> SolrParams:
    """Build parameters fetching a single document by unique key."""
    return {"q": f"{{!term f={id_field}}}{record_id}", "rows": "1"}


def compile_suggest_params(prefix: str) -> SolrParams:
    """Build parameters for the autocomplete suggester handler."""
    return {"q": prefix, "suggest.q": prefix}


def page_size(config: SearchConfig, request: SearchRequest) -> int:
    """Return the effective page size, clamped to ``1..MAX_PER_PAGE``."""
    rows = request.per_page or config.defaults.page_size
    return max(1, min(MAX_PER_PAGE, rows))


def _local_params(local_params: Mapping[str, Any]) -> str:
    """Render Solr LocalParams, e.g. ``{!qf=$title_qf pf=$title_pf}``."""
    if not local_params:
        return ""
    rendered = " ".join(f"{name}={_solr_value(value)}" for name, value in local_params.items())
    return f"{{!{rendered}}}"


def _term_filter(field: str, value: str) -> str:
    return f"{{!term f={field}}}{value}"


def _range_filter(field: str, bounds: tuple[Any, Any]) -> str:
    start, end = bounds
    low = "*" if start is None else str(start)
    high = "*" if end is None else str(end)
    return f"{field}:[{low} TO {high}]"


def _solr_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
