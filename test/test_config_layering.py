"""Tests for layered config parsing and validation."""

import os
import sys
import tempfile
import unittest
from copy import deepcopy
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from NeosCatalog.config import load_config_with_defaults, parse_config_dict
from NeosCatalog.core.errors import ConfigurationError


def _base_raw_config() -> dict:
    return {
        "log": {"level": "INFO", "to_file": False, "dir": "log"},
        "solr": {"url": "http://solr.test/solr", "collection": "catalog"},
        "holdings": {"url": "http://holdings.test"},
        "libraries": {
            "default": "neos",
            "table": {
                "neos": {"name": "NEOS", "url": "https://neos.test", "neosurl": "https://neos.test"},
            },
        },
        "search": {"page_size": 10, "spell_max": 5},
        "facets": [{"field": "format", "label": "Format", "limit": 10}],
        "search_fields": [{"key": "all_fields", "label": "All Fields"}],
        "sort_fields": [{"sort": "score desc", "label": "relevance"}],
    }


class TestConfigLayering(unittest.TestCase):
    def test_parse_success_nested_access(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.solr.url, "http://solr.test/solr")
        self.assertEqual(cfg.solr.select_path, "select")
        self.assertEqual(cfg.libraries.brands["neos"].name, "NEOS")
        self.assertEqual(cfg.search.facets[0].limit, 10)
        self.assertEqual(cfg.search.defaults.advanced_search.query_parser, "dismax")

    def test_env_overrides_service_urls(self) -> None:
        env = {"SOLR_URL": "http://other-solr:8983/solr", "HOLDINGS_URL": "http://other-holdings"}
        with patch.dict(os.environ, env, clear=True):
            cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.solr.url, "http://other-solr:8983/solr")
        self.assertEqual(cfg.holdings.url, "http://other-holdings")

    def test_missing_default_brand_is_configuration_error(self) -> None:
        raw = _base_raw_config()
        raw["libraries"]["default"] = "absent"
        with self.assertRaisesRegex(ConfigurationError, "default brand"):
            parse_config_dict(raw)

    def test_unknown_brand_policy_error(self) -> None:
        raw = _base_raw_config()
        raw["libraries"]["on_unknown"] = "guess"
        with self.assertRaisesRegex(ConfigurationError, "libraries\\.on_unknown"):
            parse_config_dict(raw)

    def test_duplicate_search_field_key_refuses_to_load(self) -> None:
        raw = _base_raw_config()
        raw["search_fields"].append({"key": "all_fields", "label": "Everything"})
        with self.assertRaisesRegex(ConfigurationError, "all_fields"):
            parse_config_dict(raw)

    def test_unknown_facet_key_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["facets"][0]["colour"] = "red"
        with self.assertRaisesRegex(ConfigurationError, "facets\\[0\\]"):
            parse_config_dict(raw)

    def test_invalid_facet_sort(self) -> None:
        raw = _base_raw_config()
        raw["facets"][0]["sort"] = "random"
        with self.assertRaisesRegex(ConfigurationError, "facets\\[0\\]\\.sort"):
            parse_config_dict(raw)

    def test_facet_limit_type_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["facets"][0]["limit"] = "10"
        with self.assertRaisesRegex(TypeError, "facets\\[0\\]\\.limit"):
            parse_config_dict(raw)

    def test_search_field_parameters_must_be_scalars(self) -> None:
        raw = _base_raw_config()
        raw["search_fields"][0]["solr_parameters"] = {"qf": ["a", "b"]}
        with self.assertRaisesRegex(TypeError, "solr_parameters\\.qf"):
            parse_config_dict(raw)

    def test_range_facet_with_limit_rejected(self) -> None:
        raw = _base_raw_config()
        raw["facets"].append({"field": "pub_date", "label": "Year", "range": True, "limit": 5})
        with self.assertRaisesRegex(ValueError, "pub_date"):
            parse_config_dict(raw)

    def test_log_level_validation(self) -> None:
        raw = _base_raw_config()
        raw["log"]["level"] = "chatty"
        with self.assertRaisesRegex(ValueError, "log\\.level"):
            parse_config_dict(raw)

    def test_solr_url_must_be_http(self) -> None:
        raw = deepcopy(_base_raw_config())
        raw["solr"]["url"] = "solr.test"
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaisesRegex(ValueError, "solr\\.url"):
                parse_config_dict(raw)

    def test_override_file_merges_over_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            override = Path(tmp) / "local.yml"
            override.write_text(
                "search:\n  page_size: 25\nlibraries:\n  on_unknown: default\n",
                encoding="utf-8",
            )
            with patch.dict(os.environ, {}, clear=True):
                cfg = load_config_with_defaults(override, default_path=REPO_ROOT / "config" / "default.yml")

        self.assertEqual(cfg.search.defaults.page_size, 25)
        self.assertEqual(cfg.search.defaults.spell_suggest_max_results, 5)
        self.assertEqual(cfg.libraries.on_unknown, "default")
        self.assertIn("neos", cfg.libraries.brands)
        self.assertEqual(cfg.search.facets[0].field_key, "electronic_tesim")


if __name__ == "__main__":
    unittest.main()
