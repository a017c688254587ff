"""Typed error taxonomy shared by configuration, enrichment and services."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog errors surfaced to callers."""


class ConfigurationError(CatalogError, ValueError):
    """Invalid catalog configuration; the process must refuse to start."""


class NotFoundError(CatalogError, LookupError):
    """Unknown brand hint or record identifier."""


class UpstreamError(CatalogError):
    """Search index or holdings service failed or timed out.

    Attributes:
        service: Collaborator name (``solr`` or ``holdings``).
        status_code: HTTP status when the failure carried one.
    """

    def __init__(self, message: str, *, service: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.service = service
        self.status_code = status_code


class DataError(CatalogError):
    """Malformed collaborator data, e.g. a holding without a location."""
