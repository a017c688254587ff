"""Search configuration model: ordered registries frozen into ``SearchConfig``."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, TypeVar

from NeosCatalog.config.common import (
    expect_bool,
    expect_int,
    expect_str,
    get_list,
    get_section,
)
from NeosCatalog.config.fields import (
    FacetFieldDef,
    ListFieldDef,
    SearchFieldDef,
    ShowFieldDef,
    SortFieldDef,
    parse_facet,
    parse_list_field,
    parse_search_field,
    parse_show_field,
    parse_sort_clauses,
    parse_sort_field,
)
from NeosCatalog.core.errors import ConfigurationError

_T = TypeVar("_T")

_DEFAULTS_KEYS = frozenset(
    {
        "page_size",
        "spell_max",
        "autocomplete_enabled",
        "autocomplete_path",
        "title_field",
        "display_type_field",
        "facet_fields_in_request",
        "advanced_search",
    }
)
_ADVANCED_KEYS = frozenset({"url_key", "query_parser", "form_solr_parameters"})


@dataclass(frozen=True, slots=True)
class AdvancedSearchConfig:
    """Advanced-search form settings.

    Attributes:
        url_key: Route segment of the advanced-search form.
        query_parser: Solr ``defType`` used for advanced queries.
        form_params: Extra Solr parameters used when rendering the form's facets.
    """

    url_key: str = "advanced"
    query_parser: str = "dismax"
    form_params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "form_params", MappingProxyType(dict(self.form_params)))


@dataclass(frozen=True, slots=True)
class GlobalQueryDefaults:
    """Query settings shared by every search request.

    Attributes:
        page_size: Default ``rows``.
        spell_suggest_max_results: No spelling suggestion above this many hits.
        autocomplete_enabled: Whether the suggester endpoint is offered.
        autocomplete_path: Solr request handler of the suggester.
        advanced_search: Advanced-search form settings.
        title_field: Field holding the record title in list and detail views.
        display_type_field: Field selecting the per-format partial.
        facet_fields_in_request: Send every configured facet field with each search.
    """

    page_size: int = 10
    spell_suggest_max_results: int = 5
    autocomplete_enabled: bool = True
    autocomplete_path: str = "suggest"
    advanced_search: AdvancedSearchConfig = AdvancedSearchConfig()
    title_field: str = "title_display"
    display_type_field: str = "format"
    facet_fields_in_request: bool = True


@dataclass(frozen=True, slots=True)
class FieldRegistry:
    facets: tuple[FacetFieldDef, ...] = ()
    list_fields: tuple[ListFieldDef, ...] = ()
    show_fields: tuple[ShowFieldDef, ...] = ()
    search_fields: tuple[SearchFieldDef, ...] = ()


@dataclass(frozen=True, slots=True)
class SortRegistry:
    sorts: tuple[SortFieldDef, ...] = ()


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Immutable search configuration consumed by the query layer.

    Built once at startup by ``SearchConfigBuilder`` and shared read-only.
    """

    fields: FieldRegistry
    sorts: SortRegistry
    defaults: GlobalQueryDefaults

    @property
    def facets(self) -> tuple[FacetFieldDef, ...]:
        return self.fields.facets

    @property
    def list_fields(self) -> tuple[ListFieldDef, ...]:
        return self.fields.list_fields

    @property
    def show_fields(self) -> tuple[ShowFieldDef, ...]:
        return self.fields.show_fields

    @property
    def search_fields(self) -> tuple[SearchFieldDef, ...]:
        return self.fields.search_fields

    @property
    def default_search_field(self) -> SearchFieldDef | None:
        return self.fields.search_fields[0] if self.fields.search_fields else None

    @property
    def default_sort(self) -> SortFieldDef | None:
        return self.sorts.sorts[0] if self.sorts.sorts else None

    def facet(self, field_key: str) -> FacetFieldDef | None:
        """Return the facet registered for ``field_key``."""
        for facet in self.fields.facets:
            if facet.field_key == field_key:
                return facet
        return None

    def search_field(self, key: str | None) -> SearchFieldDef | None:
        """Return the search field for ``key``, the default one when key is empty.

        Returns None for an unknown key.
        """
        if not key:
            return self.default_search_field
        for search_field in self.fields.search_fields:
            if search_field.key == key:
                return search_field
        return None

    def sort_field(self, value: str | None) -> SortFieldDef | None:
        """Return the sort matching a label or raw sort expression.

        Empty value selects the default sort; unknown values return None.
        """
        if not value:
            return self.default_sort
        for sort in self.sorts.sorts:
            if value in (sort.label, sort.sort_key):
                return sort
        return None


class SearchConfigBuilder:
    """Collect ordered registrations and freeze them into ``SearchConfig``.

    Registration appends only. Order of registration is display order and no
    implicit sorting or deduplication happens; conflicts are reported by
    ``build``.
    """

    def __init__(self, defaults: GlobalQueryDefaults | None = None) -> None:
        self._defaults = defaults or GlobalQueryDefaults()
        self._facets: list[FacetFieldDef] = []
        self._list_fields: list[ListFieldDef] = []
        self._show_fields: list[ShowFieldDef] = []
        self._search_fields: list[SearchFieldDef] = []
        self._sorts: list[SortFieldDef] = []

    def set_defaults(self, defaults: GlobalQueryDefaults) -> SearchConfigBuilder:
        self._defaults = defaults
        return self

    def register_facet(self, definition: FacetFieldDef) -> SearchConfigBuilder:
        self._facets.append(definition)
        return self

    def register_list_field(self, definition: ListFieldDef) -> SearchConfigBuilder:
        self._list_fields.append(definition)
        return self

    def register_show_field(self, definition: ShowFieldDef) -> SearchConfigBuilder:
        self._show_fields.append(definition)
        return self

    def register_search_field(self, definition: SearchFieldDef) -> SearchConfigBuilder:
        self._search_fields.append(definition)
        return self

    def register_sort(self, definition: SortFieldDef) -> SearchConfigBuilder:
        self._sorts.append(definition)
        return self

    def build(self) -> SearchConfig:
        """Validate registrations and return a frozen snapshot.

        Returns:
            Immutable search configuration.

        Raises:
            ConfigurationError: On duplicate search-field keys, facet fields or
                sort expressions, malformed sort expressions, or invalid defaults.
        """
        _reject_duplicates(self._search_fields, lambda d: d.key, "search field key")
        _reject_duplicates(self._facets, lambda d: d.field_key, "facet field")
        _reject_duplicates(self._sorts, lambda d: d.sort_key, "sort")
        for sort in self._sorts:
            parse_sort_clauses(sort.sort_key)
        _check_defaults(self._defaults)

        return SearchConfig(
            fields=FieldRegistry(
                facets=tuple(self._facets),
                list_fields=tuple(self._list_fields),
                show_fields=tuple(self._show_fields),
                search_fields=tuple(self._search_fields),
            ),
            sorts=SortRegistry(sorts=tuple(self._sorts)),
            defaults=self._defaults,
        )


def load_search(raw: Mapping[str, Any]) -> SearchConfig:
    """Load search configuration from the root mapping.

    Entries of ``facets``, ``index_fields``, ``show_fields``, ``search_fields``
    and ``sort_fields`` are registered in file order.

    Args:
        raw: Root configuration mapping.

    Returns:
        Built search configuration.

    Raises:
        TypeError: If config types are invalid.
        ConfigurationError: If entries are invalid or conflict.
    """
    builder = SearchConfigBuilder(_load_defaults(get_section(raw, "search", required=False)))
    for idx, item in enumerate(get_list(raw, "facets")):
        builder.register_facet(parse_facet(item, f"facets[{idx}]"))
    for idx, item in enumerate(get_list(raw, "index_fields")):
        builder.register_list_field(parse_list_field(item, f"index_fields[{idx}]"))
    for idx, item in enumerate(get_list(raw, "show_fields")):
        builder.register_show_field(parse_show_field(item, f"show_fields[{idx}]"))
    for idx, item in enumerate(get_list(raw, "search_fields")):
        builder.register_search_field(parse_search_field(item, f"search_fields[{idx}]"))
    for idx, item in enumerate(get_list(raw, "sort_fields")):
        builder.register_sort(parse_sort_field(item, f"sort_fields[{idx}]"))
    return builder.build()


def _load_defaults(section: Mapping[str, Any]) -> GlobalQueryDefaults:
    unknown = {str(k) for k in section.keys()} - _DEFAULTS_KEYS
    if unknown:
        raise ConfigurationError(f"search has unknown keys: {sorted(unknown)}")

    base = GlobalQueryDefaults()
    return GlobalQueryDefaults(
        page_size=expect_int(section.get("page_size", base.page_size), "search.page_size"),
        spell_suggest_max_results=expect_int(
            section.get("spell_max", base.spell_suggest_max_results),
            "search.spell_max",
        ),
        autocomplete_enabled=expect_bool(
            section.get("autocomplete_enabled", base.autocomplete_enabled),
            "search.autocomplete_enabled",
        ),
        autocomplete_path=expect_str(
            section.get("autocomplete_path", base.autocomplete_path),
            "search.autocomplete_path",
        ),
        advanced_search=_load_advanced(get_section(section, "advanced_search", required=False)),
        title_field=expect_str(section.get("title_field", base.title_field), "search.title_field"),
        display_type_field=expect_str(
            section.get("display_type_field", base.display_type_field),
            "search.display_type_field",
        ),
        facet_fields_in_request=expect_bool(
            section.get("facet_fields_in_request", base.facet_fields_in_request),
            "search.facet_fields_in_request",
        ),
    )


def _load_advanced(section: Mapping[str, Any]) -> AdvancedSearchConfig:
    unknown = {str(k) for k in section.keys()} - _ADVANCED_KEYS
    if unknown:
        raise ConfigurationError(f"search.advanced_search has unknown keys: {sorted(unknown)}")
    base = AdvancedSearchConfig()
    form_params = get_section(section, "form_solr_parameters", required=False)
    return AdvancedSearchConfig(
        url_key=expect_str(section.get("url_key", base.url_key), "search.advanced_search.url_key"),
        query_parser=expect_str(
            section.get("query_parser", base.query_parser),
            "search.advanced_search.query_parser",
        ),
        form_params=dict(form_params),
    )


def _check_defaults(defaults: GlobalQueryDefaults) -> None:
    if defaults.page_size <= 0:
        raise ConfigurationError("search.page_size must be positive")
    if defaults.spell_suggest_max_results < 0:
        raise ConfigurationError("search.spell_max must be >= 0")
    if defaults.autocomplete_enabled and not defaults.autocomplete_path.strip():
        raise ConfigurationError("search.autocomplete_path must not be empty when autocomplete is enabled")
    if not defaults.title_field.strip():
        raise ConfigurationError("search.title_field must not be empty")


def _reject_duplicates(items: list[_T], key: Callable[[_T], str], what: str) -> None:
    seen: set[str] = set()
    for item in items:
        value = key(item)
        if value in seen:
            raise ConfigurationError(f"Duplicate {what}: {value}")
        seen.add(value)
