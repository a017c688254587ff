"""Field, search-field and sort definitions and their YAML parsers.

Each definition kind accepts a fixed set of keys. Anything else in the YAML is
reported as a configuration error instead of being passed through to Solr.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from NeosCatalog.config.common import (
    expect_bool,
    expect_int,
    expect_mapping,
    expect_str,
)
from NeosCatalog.core.errors import ConfigurationError

FACET_KEYS = frozenset({"field", "label", "sort", "limit", "range", "collapse"})
DISPLAY_FIELD_KEYS = frozenset({"field", "label", "separator"})
SEARCH_FIELD_KEYS = frozenset({"key", "label", "solr_parameters", "solr_local_parameters", "qt"})
SORT_FIELD_KEYS = frozenset({"sort", "label"})

SORT_DIRECTIONS = ("asc", "desc")


class FacetSort(str, Enum):
    """Facet value ordering sent to Solr as ``facet.sort``."""

    INDEX = "index"
    COUNT = "count"


@dataclass(frozen=True, slots=True)
class FacetFieldDef:
    """A facet shown in the sidebar.

    Attributes:
        field_key: Indexed field the facet counts are computed on.
        label: Display label.
        sort_mode: Order of facet values.
        limit: Number of values displayed before a "more" link; None shows all.
        is_range: Render as a numeric range limit instead of a value list.
        collapsed: Start collapsed in the sidebar.
    """

    field_key: str
    label: str
    sort_mode: FacetSort = FacetSort.COUNT
    limit: Optional[int] = None
    is_range: bool = False
    collapsed: bool = True


@dataclass(frozen=True, slots=True)
class ListFieldDef:
    """A column shown for each record in the result list."""

    field_key: str
    label: str
    separator: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ShowFieldDef:
    """A row shown on the record detail page."""

    field_key: str
    label: str
    separator: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SearchFieldDef:
    """A named search field offered in the search-field pulldown.

    ``key`` appears in bookmarked URLs and must not change between releases.

    Attributes:
        key: URL identifier.
        label: Display label; derived from ``key`` when empty.
        query_params: Plain Solr request parameters added for this field.
        local_params: Solr LocalParams prepended to the query as ``{!k=v ...}``.
        query_handler: Request handler (``qt``) override.
    """

    key: str
    label: str = ""
    query_params: Mapping[str, Any] = field(default_factory=dict)
    local_params: Mapping[str, Any] = field(default_factory=dict)
    query_handler: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.label:
            object.__setattr__(self, "label", self.key.replace("_", " ").title())
        object.__setattr__(self, "query_params", MappingProxyType(dict(self.query_params)))
        object.__setattr__(self, "local_params", MappingProxyType(dict(self.local_params)))


@dataclass(frozen=True, slots=True)
class SortFieldDef:
    """A sort order offered in the "sort by" pulldown.

    Attributes:
        sort_key: Raw Solr sort expression, e.g. ``"score desc, title_sort asc"``.
        label: Display label, also accepted as the URL value.
    """

    sort_key: str
    label: str

    @property
    def clauses(self) -> tuple[tuple[str, str], ...]:
        """Return ``(field, direction)`` pairs of the sort expression."""
        return parse_sort_clauses(self.sort_key)


def parse_sort_clauses(sort_key: str) -> tuple[tuple[str, str], ...]:
    """Split a Solr sort expression into ``(field, direction)`` pairs.

    The field part may be a function query such as ``sum(a,b)``; commas inside
    parentheses do not separate clauses.

    Raises:
        ConfigurationError: If a clause is not ``<field or function> asc|desc``
            or the parentheses are unbalanced.
    """
    clauses: list[tuple[str, str]] = []
    for raw_clause in _split_top_level(sort_key):
        term, _, direction = raw_clause.strip().rpartition(" ")
        term = term.strip()
        if not term or direction.lower() not in SORT_DIRECTIONS or _has_space_outside_parens(term):
            raise ConfigurationError(f"Invalid sort clause {raw_clause.strip()!r} in {sort_key!r}")
        clauses.append((term, direction.lower()))
    return tuple(clauses)


def _split_top_level(sort_key: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in sort_key:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                break
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise ConfigurationError(f"Unbalanced parentheses in sort {sort_key!r}")
    parts.append("".join(current))
    return parts


def _has_space_outside_parens(term: str) -> bool:
    depth = 0
    for char in term:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char.isspace() and depth == 0:
            return True
    return False


def parse_facet(value: Any, config_key: str) -> FacetFieldDef:
    """Parse one ``facets`` entry.

    Args:
        value: Entry mapping.
        config_key: Full key path used in error messages.

    Returns:
        Parsed facet definition.

    Raises:
        TypeError: If value types are invalid.
        ConfigurationError: If keys are unknown or required keys are missing.
    """
    section = _entry(value, config_key, FACET_KEYS, required=("field", "label"))
    sort_raw = expect_str(section.get("sort", FacetSort.COUNT.value), f"{config_key}.sort")
    try:
        sort_mode = FacetSort(sort_raw)
    except ValueError as error:
        raise ConfigurationError(f"{config_key}.sort must be one of {[m.value for m in FacetSort]}") from error

    limit = section.get("limit")
    if limit is not None:
        limit = expect_int(limit, f"{config_key}.limit")
        if limit <= 0:
            raise ConfigurationError(f"{config_key}.limit must be positive")

    return FacetFieldDef(
        field_key=expect_str(section["field"], f"{config_key}.field"),
        label=expect_str(section["label"], f"{config_key}.label"),
        sort_mode=sort_mode,
        limit=limit,
        is_range=expect_bool(section.get("range", False), f"{config_key}.range"),
        collapsed=expect_bool(section.get("collapse", True), f"{config_key}.collapse"),
    )


def parse_list_field(value: Any, config_key: str) -> ListFieldDef:
    """Parse one ``index_fields`` entry."""
    section = _entry(value, config_key, DISPLAY_FIELD_KEYS, required=("field", "label"))
    return ListFieldDef(
        field_key=expect_str(section["field"], f"{config_key}.field"),
        label=expect_str(section["label"], f"{config_key}.label"),
        separator=_optional_str(section.get("separator"), f"{config_key}.separator"),
    )


def parse_show_field(value: Any, config_key: str) -> ShowFieldDef:
    """Parse one ``show_fields`` entry."""
    section = _entry(value, config_key, DISPLAY_FIELD_KEYS, required=("field", "label"))
    return ShowFieldDef(
        field_key=expect_str(section["field"], f"{config_key}.field"),
        label=expect_str(section["label"], f"{config_key}.label"),
        separator=_optional_str(section.get("separator"), f"{config_key}.separator"),
    )


def parse_search_field(value: Any, config_key: str) -> SearchFieldDef:
    """Parse one ``search_fields`` entry.

    Args:
        value: Entry mapping.
        config_key: Full key path used in error messages.

    Returns:
        Parsed search field definition.

    Raises:
        TypeError: If value types are invalid.
        ConfigurationError: If keys are unknown or ``key`` is missing/blank.
    """
    section = _entry(value, config_key, SEARCH_FIELD_KEYS, required=("key",))
    key = expect_str(section["key"], f"{config_key}.key").strip()
    if not key:
        raise ConfigurationError(f"{config_key}.key must not be empty")
    return SearchFieldDef(
        key=key,
        label=_optional_str(section.get("label"), f"{config_key}.label") or "",
        query_params=_scalar_mapping(section.get("solr_parameters"), f"{config_key}.solr_parameters"),
        local_params=_scalar_mapping(section.get("solr_local_parameters"), f"{config_key}.solr_local_parameters"),
        query_handler=_optional_str(section.get("qt"), f"{config_key}.qt"),
    )


def parse_sort_field(value: Any, config_key: str) -> SortFieldDef:
    """Parse one ``sort_fields`` entry."""
    section = _entry(value, config_key, SORT_FIELD_KEYS, required=("sort", "label"))
    return SortFieldDef(
        sort_key=expect_str(section["sort"], f"{config_key}.sort").strip(),
        label=expect_str(section["label"], f"{config_key}.label"),
    )


def _entry(
    value: Any,
    config_key: str,
    allowed: frozenset[str],
    *,
    required: tuple[str, ...],
) -> Mapping[str, Any]:
    """Validate entry shape, reject unknown keys and check required keys."""
    section = expect_mapping(value, config_key)
    unknown = {str(k) for k in section.keys()} - allowed
    if unknown:
        raise ConfigurationError(f"{config_key} has unknown keys: {sorted(unknown)}")
    for key in required:
        if key not in section:
            raise ConfigurationError(f"Missing required config: {config_key}.{key}")
    return section


def _optional_str(value: Any, config_key: str) -> str | None:
    if value is None:
        return None
    return expect_str(value, config_key)


def _scalar_mapping(value: Any, config_key: str) -> dict[str, Any]:
    """Validate a parameter mapping of string keys to scalar values."""
    if value is None:
        return {}
    section = expect_mapping(value, config_key)
    out: dict[str, Any] = {}
    for key, item in section.items():
        if not isinstance(key, str):
            raise TypeError(f"{config_key} keys must be strings")
        if not isinstance(item, (str, int, float, bool)):
            raise TypeError(f"{config_key}.{key} must be a scalar")
        out[key] = item
    return out
