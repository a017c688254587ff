"""CLI tests using click's CliRunner with stubbed collaborators."""

from __future__ import annotations

import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from NeosCatalog.cli.runner import CommandRunner
from NeosCatalog.cli.ui import cli
from NeosCatalog.core.brand import BrandResolver
from NeosCatalog.core.errors import NotFoundError
from NeosCatalog.core.models import HoldingEntry, SearchResult
from NeosCatalog.services.catalog import CatalogService
from NeosCatalog.utils.log import log

DEFAULT_PATH = REPO_ROOT / "config" / "default.yml"

RECORDS = {
    "b1": {
        "id": "b1",
        "title_display": "Dune",
        "author_display": ["Herbert, Frank"],
        "general_note_tesim": ["First note", "Second note"],
        "subject_t": ["Fiction--Science fiction"],
    }
}


class _StubIndex:
    name = "stub-index"

    def __init__(self) -> None:
        self.requests = []

    def search(self, config, request) -> SearchResult:
        del config
        self.requests.append(request)
        return SearchResult(records=tuple(RECORDS.values()), total=1, start=0, rows=10)

    def fetch_record(self, record_id: str):
        if record_id not in RECORDS:
            raise NotFoundError(f"Record not found: {record_id}")
        return RECORDS[record_id]

    def close(self) -> None:
        return


class _StubHoldings:
    name = "stub-holdings"

    def items(self, record_id: str):
        del record_id
        return (HoldingEntry("Annex"), HoldingEntry("main", holdable=True))

    def links(self, record_id: str):
        del record_id
        return ()

    def close(self) -> None:
        return


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.override = Path(self.tmp.name) / "local.yml"
        self.override.write_text("log:\n  level: ERROR\n", encoding="utf-8")
        self.index = _StubIndex()
        self.addCleanup(self._reset_logger)

    def _reset_logger(self) -> None:
        log.handlers.clear()
        log.filters.clear()
        log.propagate = True

    def _factory(self, config) -> CatalogService:
        return CatalogService(
            config=config.search,
            index=self.index,
            holdings=_StubHoldings(),
            brands=BrandResolver.from_config(config.libraries),
        )

    def _invoke(self, *args: str):
        def make_runner(cfg):
            return CommandRunner(cfg, service_factory=self._factory)

        with patch("NeosCatalog.cli.ui.CommandRunner", side_effect=make_runner):
            return CliRunner().invoke(
                cli,
                ["--config", str(self.override), "--defaults", str(DEFAULT_PATH), *args],
            )

    def test_search_prints_page(self) -> None:
        result = self._invoke("search", "dune", "--field", "title", "--filter", "format=Book", "--lib", "partnerlib")

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["library"]["id"], "partnerlib")
        self.assertEqual(payload["total"], 1)
        self.assertEqual(payload["records"][0]["title"], "Dune")
        self.assertEqual(payload["records"][0]["fields"][0], {"label": "Author", "value": ["Herbert, Frank"]})
        request = self.index.requests[0]
        self.assertEqual(request.search_field, "title")
        self.assertEqual(dict(request.filters), {"format": ("Book",)})

    def test_show_prints_enriched_record(self) -> None:
        result = self._invoke("show", "b1")

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["library"]["id"], "neos")
        self.assertEqual([h["location"] for h in payload["holdings"]], ["main", "Annex"])
        self.assertTrue(payload["holdable"])
        self.assertEqual(payload["subjects"], [["Fiction", "Science fiction"]])
        self.assertNotIn("fulltext_urls", payload)
        notes = [row for row in payload["fields"] if row["label"] == "General Note"]
        self.assertEqual(notes[0]["value"], "First note -- Second note")

    def test_unknown_brand_aborts(self) -> None:
        result = self._invoke("search", "dune", "--lib", "nowhere")
        self.assertEqual(result.exit_code, 1)
        self.assertEqual(self.index.requests, [])

    def test_missing_record_aborts(self) -> None:
        result = self._invoke("show", "missing")
        self.assertEqual(result.exit_code, 1)

    def test_bad_filter_is_usage_error(self) -> None:
        result = self._invoke("search", "--filter", "format")
        self.assertEqual(result.exit_code, 2)

    def test_check_config(self) -> None:
        result = self._invoke("check-config")

        self.assertEqual(result.exit_code, 0, result.output)
        payload = json.loads(result.stdout)
        self.assertEqual(payload["facets"][0], "electronic_tesim")
        self.assertEqual(payload["sorts"], ["relevance", "year", "author", "title"])
        self.assertEqual(payload["autocomplete"], "suggest")

    def test_invalid_config_reports_error(self) -> None:
        self.override.write_text("search:\n  page_size: 0\n", encoding="utf-8")
        result = self._invoke("check-config")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid configuration", result.output)


if __name__ == "__main__":
    unittest.main()
