"""Solr JSON response parser."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Sequence

from NeosCatalog.config.fields import FacetFieldDef
from NeosCatalog.config.search import SearchConfig
from NeosCatalog.core.errors import DataError
from NeosCatalog.core.models import FacetItem, FacetResult, RawRecord, SearchResult


def parse_search_response(
    payload: Mapping[str, Any],
    config: SearchConfig,
    *,
    rows: int | None = None,
) -> SearchResult:
    """Parse a Solr ``select`` response into a ``SearchResult``.

    Facets are returned in configured display order. Spelling suggestions are
    dropped when the hit count exceeds ``spell_suggest_max_results``.

    Args:
        payload: Decoded Solr JSON response.
        config: Search configuration used for the request.
        rows: Page size sent with the request; read from echoed params when None.

    Returns:
        Parsed search result.

    Raises:
        DataError: If the payload has no ``response`` object.
    """
    response = payload.get("response")
    if not isinstance(response, Mapping):
        raise DataError("Solr response has no 'response' object")

    total = _safe_int(response.get("numFound"))
    start = _safe_int(response.get("start"))
    params = _echoed_params(payload)
    if rows is None:
        rows = _safe_int(params.get("rows"), default=config.defaults.page_size)

    suggestions: tuple[str, ...] = ()
    if total <= config.defaults.spell_suggest_max_results:
        suggestions = parse_spelling(payload.get("spellcheck"))

    return SearchResult(
        records=parse_documents(response.get("docs")),
        total=total,
        start=start,
        rows=rows,
        facets=parse_facets(payload, config.facets),
        suggestions=suggestions,
    )


def parse_documents(docs: Any) -> tuple[RawRecord, ...]:
    """Return documents as read-only mappings, skipping non-objects."""
    if not isinstance(docs, list):
        return ()
    return tuple(MappingProxyType(dict(doc)) for doc in docs if isinstance(doc, Mapping))


def parse_facets(payload: Mapping[str, Any], facets: Sequence[FacetFieldDef]) -> tuple[FacetResult, ...]:
    """Parse facet counts and range statistics for configured facets.

    Facet fields absent from the response are omitted.
    """
    facet_counts = payload.get("facet_counts")
    facet_fields = facet_counts.get("facet_fields", {}) if isinstance(facet_counts, Mapping) else {}
    stats = payload.get("stats")
    stats_fields = stats.get("stats_fields", {}) if isinstance(stats, Mapping) else {}

    results: list[FacetResult] = []
    for facet in facets:
        if facet.is_range:
            field_stats = stats_fields.get(facet.field_key) if isinstance(stats_fields, Mapping) else None
            if isinstance(field_stats, Mapping):
                results.append(
                    FacetResult(
                        field_key=facet.field_key,
                        label=facet.label,
                        bounds=(field_stats.get("min"), field_stats.get("max")),
                    )
                )
            continue

        raw = facet_fields.get(facet.field_key) if isinstance(facet_fields, Mapping) else None
        if raw is None:
            continue
        items = _facet_items(raw)
        has_more = facet.limit is not None and len(items) > facet.limit
        if facet.limit is not None:
            items = items[: facet.limit]
        results.append(
            FacetResult(
                field_key=facet.field_key,
                label=facet.label,
                items=tuple(items),
                has_more=has_more,
            )
        )
    return tuple(results)


def parse_spelling(spellcheck: Any) -> tuple[str, ...]:
    """Extract suggested words from a Solr ``spellcheck`` section.

    Handles both the flat ``[term, {...}, term, {...}]`` layout and the
    ``{term: {...}}`` layout; collations are appended after single words.
    """
    if not isinstance(spellcheck, Mapping):
        return ()

    words: list[str] = []
    for entry in _named_values(spellcheck.get("suggestions")):
        if not isinstance(entry, Mapping):
            continue
        for suggestion in entry.get("suggestion", []) or []:
            word = suggestion.get("word") if isinstance(suggestion, Mapping) else suggestion
            if isinstance(word, str) and word not in words:
                words.append(word)

    for collation in _named_values(spellcheck.get("collations")):
        query = collation.get("collationQuery") if isinstance(collation, Mapping) else collation
        if isinstance(query, str) and query not in words:
            words.append(query)
    return tuple(words)


def parse_suggest_response(payload: Mapping[str, Any]) -> tuple[str, ...]:
    """Extract autocomplete terms from a Solr suggester response."""
    suggest = payload.get("suggest")
    if not isinstance(suggest, Mapping):
        return ()
    terms: list[str] = []
    for dictionary in suggest.values():
        if not isinstance(dictionary, Mapping):
            continue
        for result in dictionary.values():
            suggestions = result.get("suggestions", []) if isinstance(result, Mapping) else []
            for suggestion in suggestions:
                term = suggestion.get("term") if isinstance(suggestion, Mapping) else None
                if isinstance(term, str) and term not in terms:
                    terms.append(term)
    return tuple(terms)


def _facet_items(raw: Any) -> list[FacetItem]:
    """Parse ``[value, count, value, count, ...]`` or ``{value: count}``."""
    pairs: list[tuple[Any, Any]]
    if isinstance(raw, Mapping):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = list(zip(raw[0::2], raw[1::2]))
    else:
        return []
    return [FacetItem(value=str(value), count=_safe_int(count)) for value, count in pairs]


def _named_values(value: Any) -> list[Any]:
    """Return the values of a Solr NamedList in flat-list or object form."""
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, list):
        return list(value[1::2]) if _is_flat_named_list(value) else list(value)
    return []


def _is_flat_named_list(value: list[Any]) -> bool:
    return len(value) % 2 == 0 and all(isinstance(name, str) for name in value[0::2])


def _echoed_params(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    header = payload.get("responseHeader")
    params = header.get("params") if isinstance(header, Mapping) else None
    return params if isinstance(params, Mapping) else {}


def _safe_int(value: Any, *, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
