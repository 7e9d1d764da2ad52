"""Tests for pages/search.py – form contract and page extraction."""
import pytest

from cagr_scraper.errors import InvalidTime, TableNotFound
from cagr_scraper.models import Campus
from cagr_scraper.pages.search import (
    classes_from_html,
    find_table_rows,
    form_data,
    page_count_for,
    parse_result_count,
    parse_terms,
)

from conftest import landing_html, page_html, row_html


class TestFormData:
    def test_fields(self):
        assert form_data(Campus.JOI, "20241", 3) == {
            "formBusca": "formBusca",
            "javax.faces.ViewState": "j_id1",
            "formBusca:selectSemestre": "20241",
            "formBusca:selectCampus": "2",
            "formBusca:dataScroller1": "3",
        }

    def test_ead_code_is_zero(self):
        assert form_data(Campus.EAD, "20241", 1)["formBusca:selectCampus"] == "0"


class TestTableExtraction:
    def test_missing_table(self):
        with pytest.raises(TableNotFound):
            find_table_rows("<html><body><table><tbody></tbody></table></body></html>")

    def test_missing_table_is_never_empty_list(self):
        with pytest.raises(TableNotFound):
            classes_from_html("<html><body>Sessão expirada</body></html>")

    def test_empty_table(self):
        assert classes_from_html(page_html([])) == []

    def test_rows_in_document_order(self):
        html = page_html([
            row_html(class_id="01208"),
            row_html(class_id="02208"),
            row_html(class_id="03208"),
        ])
        assert [cls.id for cls in classes_from_html(html)] == ["01208", "02208", "03208"]

    def test_bad_row_fails_page(self):
        html = page_html([row_html(), row_html(schedule=("nonsense",))])
        with pytest.raises(InvalidTime):
            classes_from_html(html)


class TestResultCount:
    def test_present(self):
        assert parse_result_count(page_html([], result_count=1234)) == 1234

    def test_missing_defaults_to_zero(self):
        assert parse_result_count(page_html([])) == 0

    def test_unparsable_defaults_to_zero(self):
        html = '<span id="formBusca:dataTableGroup"><span>muitos</span></span>'
        assert parse_result_count(html) == 0

    def test_nested_span_only(self):
        html = '<span id="formBusca:dataTableGroup">51</span>'
        assert parse_result_count(html) == 0


class TestPageCount:
    @pytest.mark.parametrize(
        "results, pages",
        [(0, 0), (1, 1), (49, 1), (50, 1), (51, 2), (100, 2), (101, 3)],
    )
    def test_ceiling_division(self, results, pages):
        assert page_count_for(results) == pages

    def test_custom_page_size(self):
        assert page_count_for(21, page_size=10) == 3


class TestParseTerms:
    def test_order_kept(self):
        assert parse_terms(landing_html(["20242", "20241", "20232"])) == [
            "20242", "20241", "20232",
        ]

    def test_empty_value_kept_missing_value_skipped(self):
        html = (
            '<select id="formBusca:selectSemestre">'
            '<option value="">--</option><option>sem valor</option>'
            '<option value="20241">2024/1</option></select>'
        )
        assert parse_terms(html) == ["", "20241"]

    def test_missing_dropdown(self):
        assert parse_terms("<html></html>") == []
