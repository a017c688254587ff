from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

RawRecord = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class LibraryBrand:
    """A member library of the consortium catalog.

    Attributes:
        brand_id: Lookup key, also the ``lib`` request hint.
        name: Display name of the library.
        home_url: Library home page.
        secondary_portal_url: Consortium portal link shown beside the home link.
    """

    brand_id: str
    name: str
    home_url: str
    secondary_portal_url: str


@dataclass(frozen=True, slots=True)
class HoldingEntry:
    """One physical or electronic copy as reported by the holdings service.

    Attributes:
        location: Shelving location; None only for malformed service data.
        holdable: Whether the copy can be placed on hold.
        bookable: Whether the copy can be booked.
        extra: Every other attribute from the service, passed through read-only.
    """

    location: Optional[str]
    holdable: bool = False
    bookable: bool = False
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))


@dataclass(frozen=True, slots=True)
class EnrichedRecord:
    """Display-ready derivation of a raw index record.

    ``None`` on an optional attribute means the record carried no source data
    for it; an empty tuple means the source data was present but empty.

    Attributes:
        id: Record identifier.
        title: Display title, never empty.
        holdings: Holdings sorted by lower-cased location, descending.
        holdable: Flag taken from the first sorted holding.
        bookable: Flag taken from the first sorted holding.
        fulltext_urls: Full-text links, or None when the record has none.
        subjects: Each subject split into its sub-topic chain.
        additional_authors: Additional authors/performers.
        holdings_error: Reason holdings were omitted, when they were.
        fields: Read-only view of the raw record.
    """

    id: str
    title: str
    holdings: Sequence[HoldingEntry] = ()
    holdable: bool = False
    bookable: bool = False
    fulltext_urls: Optional[Sequence[str]] = None
    subjects: Optional[Sequence[Sequence[str]]] = None
    additional_authors: Optional[Sequence[str]] = None
    holdings_error: Optional[str] = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True, slots=True)
class FacetItem:
    value: str
    count: int


@dataclass(frozen=True, slots=True)
class FacetResult:
    """Counts for one configured facet in a result page.

    Attributes:
        field_key: Indexed facet field.
        label: Display label from the facet definition.
        items: Values in the order Solr returned them, cut to the display limit.
        has_more: True when Solr returned more values than the display limit.
        bounds: (min, max) of a range facet over the result set.
    """

    field_key: str
    label: str
    items: Sequence[FacetItem] = ()
    has_more: bool = False
    bounds: Optional[tuple[Any, Any]] = None


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One page of search results.

    Attributes:
        records: Raw records of this page.
        total: Number of matching records in the index.
        start: Zero-based offset of the first record.
        rows: Page size used for the request.
        facets: Facet counts in configured display order.
        suggestions: Spelling suggestions; empty when suppressed.
    """

    records: Sequence[RawRecord]
    total: int
    start: int
    rows: int
    facets: Sequence[FacetResult] = ()
    suggestions: Sequence[str] = ()

    @property
    def page(self) -> int:
        return self.start // self.rows + 1 if self.rows > 0 else 1

    @property
    def total_pages(self) -> int:
        if self.rows <= 0:
            return 1
        return max(1, -(-self.total // self.rows))
