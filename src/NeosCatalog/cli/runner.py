"""Command runner for coordinating CLI execution.

Manages logging configuration, service lifecycle and error handling for
command execution.
"""

from __future__ import annotations

from typing import Callable

import click

from NeosCatalog.config import AppConfig
from NeosCatalog.core.errors import CatalogError
from NeosCatalog.core.query import SearchRequest
from NeosCatalog.renderers import dumps, render_config, render_detail, render_search_page
from NeosCatalog.services import CatalogService, create_catalog_service
from NeosCatalog.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(
        self,
        config: AppConfig,
        service_factory: Callable[[AppConfig], CatalogService] = create_catalog_service,
    ) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
            service_factory: Builds the catalog service; replaceable in tests.
        """
        self.config = config
        self.service_factory = service_factory

    def run_search(self, action: str, request: SearchRequest, *, brand_hint: str | None) -> None:
        """Run a list-view search and print the page as JSON.

        Raises:
            click.Abort: When the search fails.
        """
        self._configure(action)
        with self._service(action) as service:
            page = service.search(request, brand_hint=brand_hint)
            click.echo(dumps(render_search_page(page, self.config.search)))

    def run_show(self, action: str, record_id: str, *, brand_hint: str | None) -> None:
        """Fetch one enriched record and print it as JSON.

        Raises:
            click.Abort: When the record cannot be shown.
        """
        self._configure(action)
        with self._service(action) as service:
            view = service.show(record_id, brand_hint=brand_hint)
            click.echo(dumps(render_detail(view, self.config.search)))

    def run_check_config(self, action: str) -> None:
        """Print the effective search configuration summary."""
        self._configure(action)
        click.echo(dumps(render_config(self.config.search)))

    def _configure(self, action: str) -> None:
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )

    def _service(self, action: str) -> _ServiceScope:
        return _ServiceScope(self.service_factory(self.config), action)


class _ServiceScope:
    """Close the service on exit and turn catalog errors into ``click.Abort``."""

    def __init__(self, service: CatalogService, action: str) -> None:
        self.service = service
        self.action = action

    def __enter__(self) -> CatalogService:
        return self.service

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.service.close()
        if isinstance(exc_val, CatalogError):
            log.error("%s failed: %s", self.action, exc_val)
            raise click.Abort from exc_val
        return False
