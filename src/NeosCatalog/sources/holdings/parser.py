"""Holdings service payload parser."""

from __future__ import annotations

from typing import Any, Mapping

from NeosCatalog.core.errors import DataError
from NeosCatalog.core.models import HoldingEntry

_KNOWN_KEYS = ("location", "holdable", "bookable")


def parse_items(payload: Any) -> tuple[HoldingEntry, ...]:
    """Parse the ``items`` payload into holdings in service order.

    Entries keep their location as reported; a missing location is left as
    None and rejected later by enrichment, where the sort key is required.

    Raises:
        DataError: If the payload is not a list of objects.
    """
    entries = _expect_list(payload, "items")
    holdings: list[HoldingEntry] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise DataError(f"Holdings item #{idx} is not an object")
        location = entry.get("location")
        holdings.append(
            HoldingEntry(
                location=location if isinstance(location, str) else None,
                holdable=_flag(entry.get("holdable")),
                bookable=_flag(entry.get("bookable")),
                extra={key: value for key, value in entry.items() if key not in _KNOWN_KEYS},
            )
        )
    return tuple(holdings)


def parse_links(payload: Any) -> tuple[str, ...]:
    """Parse the ``links`` payload into URLs.

    Accepts plain URL strings or objects with a ``url``/``href`` key; other
    entries are skipped.
    """
    urls: list[str] = []
    for entry in _expect_list(payload, "links"):
        if isinstance(entry, str):
            url = entry
        elif isinstance(entry, Mapping):
            url = entry.get("url") or entry.get("href")
        else:
            url = None
        if isinstance(url, str) and url.strip():
            urls.append(url.strip())
    return tuple(urls)


def _expect_list(payload: Any, mode: str) -> list[Any]:
    if payload is None:
        return []
    if isinstance(payload, Mapping) and mode in payload:
        payload = payload[mode]
    if not isinstance(payload, list):
        raise DataError(f"Holdings {mode} payload must be a list")
    return payload


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "y")
    return bool(value)
