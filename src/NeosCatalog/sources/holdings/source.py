"""Holdings service adapter."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from NeosCatalog.config.backend import HoldingsConfig
from NeosCatalog.core.models import HoldingEntry
from NeosCatalog.sources.holdings.parser import parse_items, parse_links
from NeosCatalog.sources.http import JsonApiClient
from NeosCatalog.utils.log import log

ITEMS_MODE = "items"
LINKS_MODE = "links"


@dataclass(slots=True)
class HoldingsService:
    """``HoldingsProvider`` implementation backed by the holdings HTTP service.

    Requests ``GET {url}/{mode}/{record_id}`` where mode is ``items`` or
    ``links``. An empty answer is valid; failures propagate as UpstreamError.
    """

    client: JsonApiClient
    name: str = "holdings"

    @classmethod
    def from_config(cls, config: HoldingsConfig) -> HoldingsService:
        return cls(
            client=JsonApiClient(
                config.url,
                service="holdings",
                timeout=config.timeout,
                max_attempts=config.max_attempts,
            )
        )

    def items(self, record_id: str) -> tuple[HoldingEntry, ...]:
        """Return holdings of ``record_id`` in service order."""
        payload = self.client.get_json(f"{ITEMS_MODE}/{quote(record_id, safe='')}")
        holdings = parse_items(payload)
        log.debug("Holdings items: record=%s count=%d", record_id, len(holdings))
        return holdings

    def links(self, record_id: str) -> tuple[str, ...]:
        """Return full-text URLs of ``record_id``."""
        payload = self.client.get_json(f"{LINKS_MODE}/{quote(record_id, safe='')}")
        links = parse_links(payload)
        log.debug("Holdings links: record=%s count=%d", record_id, len(links))
        return links

    def close(self) -> None:
        self.client.close()
