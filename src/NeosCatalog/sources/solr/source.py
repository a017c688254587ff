"""Solr record index adapter.

Composes parameter compilation, HTTP fetching and response parsing into a
``RecordIndex`` implementation.
"""

from __future__ import annotations

from dataclasses import dataclass

from NeosCatalog.config.backend import SolrConfig
from NeosCatalog.config.search import SearchConfig
from NeosCatalog.core.errors import DataError, NotFoundError, UpstreamError
from NeosCatalog.core.models import RawRecord, SearchResult
from NeosCatalog.core.query import SearchRequest
from NeosCatalog.sources.http import JsonApiClient
from NeosCatalog.sources.solr.parser import (
    parse_documents,
    parse_search_response,
    parse_suggest_response,
)
from NeosCatalog.sources.solr.query import (
    compile_advanced_form_params,
    compile_document_params,
    compile_search_params,
    compile_suggest_params,
    page_size,
)
from NeosCatalog.utils.log import log


@dataclass(slots=True)
class SolrIndex:
    """``RecordIndex`` implementation backed by a Solr collection."""

    client: JsonApiClient
    collection: str
    select_path: str = "select"
    document_path: str = "select"
    id_field: str = "id"
    name: str = "solr"

    @classmethod
    def from_config(cls, config: SolrConfig) -> SolrIndex:
        client = JsonApiClient(
            config.url,
            service="solr",
            timeout=config.timeout,
            max_attempts=config.max_attempts,
        )
        return cls(
            client=client,
            collection=config.collection,
            select_path=config.select_path,
            document_path=config.document_path,
        )

    def search(self, config: SearchConfig, request: SearchRequest) -> SearchResult:
        """Run a list-view search.

        Raises:
            NotFoundError: If the request names an unknown search field or sort.
            UpstreamError: If Solr fails or answers with an unusable payload.
        """
        params = compile_search_params(config, request)
        log.debug("Solr search params: %s", params)
        payload = self._select(self.select_path, params)
        try:
            return parse_search_response(payload, config, rows=page_size(config, request))
        except DataError as error:
            raise UpstreamError(str(error), service=self.name) from error

    def advanced_form(self, config: SearchConfig) -> SearchResult:
        """Fetch facet values for the advanced-search form."""
        payload = self._select(self.select_path, compile_advanced_form_params(config))
        try:
            return parse_search_response(payload, config, rows=0)
        except DataError as error:
            raise UpstreamError(str(error), service=self.name) from error

    def fetch_record(self, record_id: str) -> RawRecord:
        """Fetch one document by unique key.

        Raises:
            NotFoundError: If no document has ``record_id``.
            UpstreamError: If Solr fails.
        """
        if not record_id.strip():
            raise NotFoundError("Missing record identifier")
        payload = self._select(self.document_path, compile_document_params(record_id, id_field=self.id_field))
        response = payload.get("response") if isinstance(payload, dict) else None
        docs = parse_documents(response.get("docs") if isinstance(response, dict) else None)
        if not docs:
            raise NotFoundError(f"Record not found: {record_id}")
        return docs[0]

    def suggest(self, path: str, prefix: str) -> tuple[str, ...]:
        """Return autocomplete terms for ``prefix`` from the suggester handler."""
        payload = self._select(path, compile_suggest_params(prefix))
        return parse_suggest_response(payload) if isinstance(payload, dict) else ()

    def close(self) -> None:
        self.client.close()

    def _select(self, handler: str, params: dict) -> dict:
        payload = self.client.get_json(f"{self.collection}/{handler}", params={**params, "wt": "json"})
        if not isinstance(payload, dict):
            raise UpstreamError("Solr returned a non-object payload", service=self.name)
        return payload
