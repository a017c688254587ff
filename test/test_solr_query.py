"""Tests for compiling search requests into Solr parameters."""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from NeosCatalog.config import (
    FacetFieldDef,
    FacetSort,
    GlobalQueryDefaults,
    SearchConfigBuilder,
    SearchFieldDef,
    SortFieldDef,
)
from NeosCatalog.core.errors import NotFoundError
from NeosCatalog.core.query import SearchRequest
from NeosCatalog.sources.solr.query import (
    MAX_PER_PAGE,
    compile_advanced_form_params,
    compile_document_params,
    compile_facet_params,
    compile_search_params,
)


def _config(**defaults):
    return (
        SearchConfigBuilder(GlobalQueryDefaults(**defaults))
        .register_facet(FacetFieldDef("format", "Format", limit=10))
        .register_facet(FacetFieldDef("institution_tesim", "Institution", sort_mode=FacetSort.INDEX))
        .register_facet(FacetFieldDef("pub_date", "Year", is_range=True))
        .register_search_field(SearchFieldDef("all_fields", "All Fields"))
        .register_search_field(
            SearchFieldDef(
                "title",
                query_params={"spellcheck.dictionary": "title"},
                local_params={"qf": "$title_qf", "pf": "$title_pf"},
            )
        )
        .register_search_field(SearchFieldDef("subject", query_handler="search"))
        .register_sort(SortFieldDef("score desc, pub_date_sort desc, title_sort asc", "relevance"))
        .register_sort(SortFieldDef("pub_date_sort desc, title_sort asc", "year"))
        .build()
    )


class TestCompileSearchParams(unittest.TestCase):
    def test_fielded_query_uses_local_params(self) -> None:
        params = compile_search_params(_config(), SearchRequest(query="dune", search_field="title"))

        self.assertEqual(params["q"], "{!qf=$title_qf pf=$title_pf}dune")
        self.assertEqual(params["spellcheck.dictionary"], "title")
        self.assertEqual(params["rows"], "10")
        self.assertEqual(params["start"], "0")
        self.assertEqual(params["sort"], "score desc, pub_date_sort desc, title_sort asc")
        self.assertNotIn("qt", params)

    def test_empty_query_omits_q(self) -> None:
        params = compile_search_params(_config(), SearchRequest())
        self.assertNotIn("q", params)

    def test_query_handler_and_advanced_parser(self) -> None:
        params = compile_search_params(_config(), SearchRequest(query="maps", search_field="subject", advanced=True))
        self.assertEqual(params["qt"], "search")
        self.assertEqual(params["defType"], "dismax")

    def test_paging(self) -> None:
        params = compile_search_params(_config(), SearchRequest(page=3, per_page=20))
        self.assertEqual(params["rows"], "20")
        self.assertEqual(params["start"], "40")

        capped = compile_search_params(_config(), SearchRequest(per_page=10_000))
        self.assertEqual(capped["rows"], str(MAX_PER_PAGE))

    def test_sort_by_label(self) -> None:
        params = compile_search_params(_config(), SearchRequest(sort="year"))
        self.assertEqual(params["sort"], "pub_date_sort desc, title_sort asc")

    def test_filters(self) -> None:
        request = SearchRequest(
            filters={"format": ["Book", "Map"]},
            range_filters={"pub_date": (1900, None)},
        )
        params = compile_search_params(_config(), request)
        self.assertEqual(
            params["fq"],
            ["{!term f=format}Book", "{!term f=format}Map", "pub_date:[1900 TO *]"],
        )

    def test_unknown_search_field_and_sort(self) -> None:
        with self.assertRaisesRegex(NotFoundError, "isbn"):
            compile_search_params(_config(), SearchRequest(search_field="isbn"))
        with self.assertRaisesRegex(NotFoundError, "shelf"):
            compile_search_params(_config(), SearchRequest(sort="shelf"))

    def test_facets_can_be_left_out(self) -> None:
        params = compile_search_params(_config(facet_fields_in_request=False), SearchRequest())
        self.assertNotIn("facet", params)
        self.assertNotIn("facet.field", params)


class TestCompileFacetParams(unittest.TestCase):
    def test_limit_sort_and_range(self) -> None:
        params = compile_facet_params(_config())

        self.assertEqual(params["facet"], "true")
        self.assertEqual(params["facet.field"], ["format", "institution_tesim"])
        self.assertEqual(params["f.format.facet.limit"], "11")
        self.assertNotIn("f.format.facet.sort", params)
        self.assertEqual(params["f.institution_tesim.facet.sort"], "index")
        self.assertNotIn("f.institution_tesim.facet.limit", params)
        self.assertEqual(params["stats"], "true")
        self.assertEqual(params["stats.field"], ["pub_date"])

    def test_advanced_form_requests_no_rows(self) -> None:
        params = compile_advanced_form_params(_config())
        self.assertEqual(params["rows"], "0")
        self.assertEqual(params["facet.field"], ["format", "institution_tesim"])

    def test_document_params(self) -> None:
        self.assertEqual(compile_document_params("b123"), {"q": "{!term f=id}b123", "rows": "1"})


if __name__ == "__main__":
    unittest.main()
