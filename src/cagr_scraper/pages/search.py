"""Search page - form contract and page-level extraction for CAGR.

The catalog is a JSF page at /modules/comunidade/cadastroTurmas/. Every
request is a POST of the `formBusca` form; the server keeps the search
state in the session cookie, so all requests of one scrape must share a
cookie jar.

DOM structure:
  select#formBusca:selectSemestre
    option[value="20241"] per term, most recent first
  span#formBusca:dataTableGroup
    span -> total number of results ("1234")
  table#formBusca:dataTable
    tbody#formBusca:dataTable:tb
      tr -> one class per row, see cagr_scraper.parse for the columns

Pagination (formBusca:dataScroller1):
  Page 1 renders rows but not the result count, so the count is read from
  page 2. Past the last page the server keeps returning the last page.
"""

import math

from bs4 import BeautifulSoup, Tag

from cagr_scraper.errors import TableNotFound
from cagr_scraper.logging import get_logger
from cagr_scraper.models import Campus, Class
from cagr_scraper.parse import parse_class_row, row_cells

log = get_logger(__name__)

FORM_ID = "formBusca"
VIEW_STATE_FIELD = "javax.faces.ViewState"
VIEW_STATE = "j_id1"
TERM_FIELD = "formBusca:selectSemestre"
CAMPUS_FIELD = "formBusca:selectCampus"
PAGE_FIELD = "formBusca:dataScroller1"

TABLE_BODY_ID = "formBusca:dataTable:tb"
RESULT_COUNT_ID = "formBusca:dataTableGroup"
TERM_SELECT_ID = TERM_FIELD

PAGE_SIZE = 50


def form_data(campus: Campus, term: str, page_index: int) -> dict[str, str]:
    """Build the `formBusca` submission for one results page."""
    return {
        FORM_ID: FORM_ID,
        VIEW_STATE_FIELD: VIEW_STATE,
        TERM_FIELD: term,
        CAMPUS_FIELD: str(int(campus)),
        PAGE_FIELD: str(page_index),
    }


def _soup(html: str | BeautifulSoup) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html, "html.parser")


def find_table_rows(html: str | BeautifulSoup) -> list[Tag]:
    """Return the rows of the results table body in document order.

    Raises:
        TableNotFound: If the page has no results table body.
    """
    soup = _soup(html)
    body = soup.find("tbody", id=TABLE_BODY_ID)
    if body is None:
        raise TableNotFound(TABLE_BODY_ID)
    return body.find_all("tr")


def classes_from_html(html: str | BeautifulSoup) -> list[Class]:
    """Parse every row of a results page into Class records.

    The first malformed row aborts the page.
    """
    return [parse_class_row(row_cells(row)) for row in find_table_rows(html)]


def parse_result_count(html: str | BeautifulSoup) -> int:
    """Read the total number of results from a page.

    Returns 0 when the count element is missing or not a number. This is a
    known precision gap: a changed layout looks like an empty catalog.
    """
    soup = _soup(html)
    group = soup.find("span", id=RESULT_COUNT_ID)
    count = group.find("span", recursive=False) if group is not None else None
    text = count.get_text().strip() if count is not None else ""

    if not text.isascii() or not text.isdigit():
        log.warning("result_count_missing", element_id=RESULT_COUNT_ID, text=text)
        return 0
    return int(text)


def page_count_for(result_count: int, page_size: int = PAGE_SIZE) -> int:
    """Number of pages needed for `result_count` rows (ceiling division)."""
    return math.ceil(result_count / page_size)


def parse_terms(html: str | BeautifulSoup) -> list[str]:
    """Return the term tokens offered by the term dropdown, in page order.

    Options without a `value` attribute are skipped; an empty value is kept.
    """
    soup = _soup(html)
    select = soup.find("select", id=TERM_SELECT_ID)
    if select is None:
        return []

    terms = []
    for option in select.find_all("option", recursive=False):
        value = option.get("value")
        if value is not None:
            terms.append(value)
    return terms
