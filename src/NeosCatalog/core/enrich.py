"""Detail-view enrichment of raw index records.

Derives display data for the record page from the raw Solr document and the
holdings reported for it. Optional derivations degrade to ``None`` when the
record has no source data; only malformed holdings raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from NeosCatalog.core.errors import DataError
from NeosCatalog.core.models import EnrichedRecord, HoldingEntry, RawRecord

UNTITLED = "Untitled document"
SUBJECT_DELIMITER = "--"


@dataclass(frozen=True, slots=True)
class RecordEnricher:
    """Build ``EnrichedRecord`` values from raw records.

    Attributes:
        id_field: Unique key field.
        title_field: Title field; falls back to ``UNTITLED``.
        fulltext_field: Field whose presence marks a record with full text.
        subject_field: Subject headings, sub-topics joined by ``--``.
        additional_authors_field: Additional authors/performers.
    """

    id_field: str = "id"
    title_field: str = "title_display"
    fulltext_field: str = "url_fulltext_display"
    subject_field: str = "subject_t"
    additional_authors_field: str = "author_addl_t"

    def needs_links(self, record: RawRecord) -> bool:
        """Return True when full-text links should be fetched for ``record``."""
        return bool(_values(record.get(self.fulltext_field)))

    def enrich(
        self,
        record: RawRecord,
        holdings: Sequence[HoldingEntry],
        *,
        links: Optional[Sequence[str]] = None,
    ) -> EnrichedRecord:
        """Derive the detail view of ``record``.

        Args:
            record: Raw index document; never mutated.
            holdings: Holdings reported for the record, in service order.
            links: Full-text URLs from the holdings service. When None and the
                record has full text, the full-text field values are used.

        Returns:
            Enriched record.

        Raises:
            DataError: If a holding has no location.
        """
        sorted_holdings = sort_holdings(holdings)
        first = sorted_holdings[0] if sorted_holdings else None
        return EnrichedRecord(
            id=str(record.get(self.id_field, "")),
            title=self._title(record),
            holdings=sorted_holdings,
            holdable=bool(first.holdable) if first else False,
            bookable=bool(first.bookable) if first else False,
            fulltext_urls=self._fulltext_urls(record, links),
            subjects=split_subjects(record.get(self.subject_field)),
            additional_authors=self._additional_authors(record),
            fields=record,
        )

    def _title(self, record: RawRecord) -> str:
        values = _values(record.get(self.title_field))
        title = str(values[0]).strip() if values else ""
        return title or UNTITLED

    def _fulltext_urls(self, record: RawRecord, links: Optional[Sequence[str]]) -> Optional[tuple[str, ...]]:
        indicator = _values(record.get(self.fulltext_field))
        if not indicator:
            return None
        if links is not None:
            return tuple(links)
        return tuple(str(value) for value in indicator)

    def _additional_authors(self, record: RawRecord) -> Optional[tuple[str, ...]]:
        if self.additional_authors_field not in record:
            return None
        value = record[self.additional_authors_field]
        if value is None:
            return None
        return tuple(value) if isinstance(value, (list, tuple)) else (value,)


def sort_holdings(holdings: Sequence[HoldingEntry]) -> tuple[HoldingEntry, ...]:
    """Sort holdings by lower-cased location, descending (Z before A).

    ``sorted`` is stable, so entries with equal keys keep their input order.

    Raises:
        DataError: If an entry has no string location.
    """
    for idx, entry in enumerate(holdings):
        if not isinstance(entry.location, str):
            raise DataError(f"Holding #{idx} has no location")
    return tuple(sorted(holdings, key=lambda entry: entry.location.lower(), reverse=True))


def split_subjects(value: Any) -> Optional[tuple[tuple[str, ...], ...]]:
    """Split each subject heading into its sub-topic chain.

    ``"Fiction--Mystery"`` becomes ``("Fiction", "Mystery")``. Returns None when
    the record carries no subject field.
    """
    if value is None:
        return None
    return tuple(tuple(str(subject).split(SUBJECT_DELIMITER)) for subject in _values(value))


def _values(value: Any) -> list[Any]:
    """Normalize an absent, scalar or multi-valued field into a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None and item != ""]
    if value == "":
        return []
    return [value]
