"""Tests for search configuration registration and build validation."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from NeosCatalog.config import (
    FacetFieldDef,
    FacetSort,
    GlobalQueryDefaults,
    ListFieldDef,
    SearchConfigBuilder,
    SearchFieldDef,
    ShowFieldDef,
    SortFieldDef,
)
from NeosCatalog.core.errors import ConfigurationError


class TestSearchConfigBuilder(unittest.TestCase):
    def test_registration_order_is_display_order(self) -> None:
        config = (
            SearchConfigBuilder()
            .register_facet(FacetFieldDef("format", "Format", limit=10))
            .register_facet(FacetFieldDef("access", "Access", collapsed=False))
            .register_facet(FacetFieldDef("institution", "Institution", sort_mode=FacetSort.INDEX))
            .build()
        )
        self.assertEqual([f.field_key for f in config.facets], ["format", "access", "institution"])
        self.assertEqual(config.facet("institution").sort_mode, FacetSort.INDEX)
        self.assertIsNone(config.facet("missing"))

    def test_list_and_show_fields_allow_duplicates(self) -> None:
        config = (
            SearchConfigBuilder()
            .register_list_field(ListFieldDef("author_display", "Author"))
            .register_list_field(ListFieldDef("author_display", "Author"))
            .register_show_field(ShowFieldDef("published_display", "Published"))
            .register_show_field(ShowFieldDef("published_vern_display", "Published"))
            .build()
        )
        self.assertEqual(len(config.list_fields), 2)
        self.assertEqual([f.field_key for f in config.show_fields], ["published_display", "published_vern_display"])

    def test_duplicate_search_field_key_fails_at_build(self) -> None:
        builder = SearchConfigBuilder()
        builder.register_search_field(SearchFieldDef("title", "Title"))
        builder.register_search_field(SearchFieldDef("title", "Title again"))
        with self.assertRaisesRegex(ConfigurationError, "Duplicate search field key: title"):
            builder.build()

    def test_duplicate_facet_field_fails_at_build(self) -> None:
        builder = SearchConfigBuilder()
        builder.register_facet(FacetFieldDef("format", "Format"))
        builder.register_facet(FacetFieldDef("format", "Type"))
        with self.assertRaisesRegex(ConfigurationError, "facet field"):
            builder.build()

    def test_malformed_sort_expression_fails_at_build(self) -> None:
        builder = SearchConfigBuilder().register_sort(SortFieldDef("title_sort upward", "title"))
        with self.assertRaisesRegex(ConfigurationError, "Invalid sort clause"):
            builder.build()

    def test_function_sort_with_inner_commas(self) -> None:
        config = (
            SearchConfigBuilder()
            .register_sort(SortFieldDef("sum(pub_date_sort, 1) desc, title_sort asc", "weighted"))
            .build()
        )
        self.assertEqual(
            config.default_sort.clauses,
            (("sum(pub_date_sort, 1)", "desc"), ("title_sort", "asc")),
        )

    def test_malformed_function_sort_fails_at_build(self) -> None:
        for sort_key in ("sum(a,b desc", "sum(a,b)) desc", "title_sort", "title sort asc"):
            with self.subTest(sort=sort_key):
                builder = SearchConfigBuilder().register_sort(SortFieldDef(sort_key, "bad"))
                with self.assertRaises(ConfigurationError):
                    builder.build()

    def test_invalid_defaults_fail_at_build(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "page_size"):
            SearchConfigBuilder(GlobalQueryDefaults(page_size=0)).build()
        with self.assertRaisesRegex(ConfigurationError, "autocomplete_path"):
            SearchConfigBuilder(GlobalQueryDefaults(autocomplete_path=" ")).build()

    def test_first_sort_is_default_and_lookup_by_label_or_key(self) -> None:
        config = (
            SearchConfigBuilder()
            .register_sort(SortFieldDef("score desc, pub_date_sort desc, title_sort asc", "relevance"))
            .register_sort(SortFieldDef("pub_date_sort desc, title_sort asc", "year"))
            .build()
        )
        self.assertEqual(config.default_sort.label, "relevance")
        self.assertEqual(config.sort_field(None).label, "relevance")
        self.assertEqual(config.sort_field("year").sort_key, "pub_date_sort desc, title_sort asc")
        self.assertEqual(config.sort_field("pub_date_sort desc, title_sort asc").label, "year")
        self.assertIsNone(config.sort_field("nope"))
        self.assertEqual(
            config.sorts.sorts[0].clauses,
            (("score", "desc"), ("pub_date_sort", "desc"), ("title_sort", "asc")),
        )

    def test_search_field_lookup_and_label_default(self) -> None:
        config = (
            SearchConfigBuilder()
            .register_search_field(SearchFieldDef("all_fields"))
            .register_search_field(
                SearchFieldDef(
                    "subject",
                    query_params={"spellcheck.dictionary": "subject"},
                    local_params={"qf": "$subject_qf"},
                    query_handler="search",
                )
            )
            .build()
        )
        self.assertEqual(config.default_search_field.label, "All Fields")
        self.assertEqual(config.search_field("").key, "all_fields")
        subject = config.search_field("subject")
        self.assertEqual(subject.label, "Subject")
        self.assertEqual(subject.query_handler, "search")
        self.assertIsNone(config.search_field("isbn"))

    def test_built_config_is_immutable(self) -> None:
        params = {"spellcheck.dictionary": "title"}
        builder = SearchConfigBuilder().register_search_field(SearchFieldDef("title", query_params=params))
        config = builder.build()
        params["spellcheck.dictionary"] = "changed"
        builder.register_search_field(SearchFieldDef("author"))

        self.assertEqual(config.search_field("title").query_params["spellcheck.dictionary"], "title")
        self.assertEqual(len(config.search_fields), 1)
        with self.assertRaises(TypeError):
            config.search_field("title").query_params["qt"] = "x"  # type: ignore[index]


if __name__ == "__main__":
    unittest.main()
