from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Sequence


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """Normalized list-view request passed through the service layer.

    Attributes:
        query: User query text; empty means "match everything".
        search_field: Key of a configured search field, or None for the default.
        filters: Facet field -> selected values; values of one field are ANDed.
        range_filters: Range facet field -> (start, end); either bound may be None.
        sort: Sort label or raw sort expression, or None for the default sort.
        page: 1-based page number.
        per_page: Page size, or None for the configured default.
        advanced: Use the advanced-search query parser and form parameters.
    """

    query: str = ""
    search_field: Optional[str] = None
    filters: Mapping[str, Sequence[str]] = field(default_factory=dict)
    range_filters: Mapping[str, tuple[Optional[int], Optional[int]]] = field(default_factory=dict)
    sort: Optional[str] = None
    page: int = 1
    per_page: Optional[int] = None
    advanced: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "filters",
            MappingProxyType({key: tuple(values) for key, values in self.filters.items()}),
        )
        object.__setattr__(self, "range_filters", MappingProxyType(dict(self.range_filters)))
        if self.page < 1:
            object.__setattr__(self, "page", 1)
