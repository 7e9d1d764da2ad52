"""Shared fixtures: HTML builders and an in-memory CAGR server."""

from dataclasses import dataclass, field
from itertools import count
from urllib.parse import parse_qsl

import httpx
import pytest

from cagr_scraper.config import ScraperConfig
from cagr_scraper.pages.search import CAMPUS_FIELD, PAGE_FIELD, TERM_FIELD

TEST_URL = "https://cagr.test/modules/comunidade/cadastroTurmas/"


# ── HTML builders ──────────────────────────────────────────────

def row_html(
    course_id: str = "INE5410",
    class_id: str = "04208A",
    title: str = "Programação Concorrente",
    labels: tuple[str, ...] = (),
    credits: str = "4",
    capacity: str = "40",
    enrolled: str = "38",
    waiting: str = "",
    schedule: tuple[str, ...] = ("2.0820-2 / CTC-CTC107", "4.1010-2 / CTC-CTC107"),
    professors: tuple[str, ...] = ("Ana Souza",),
) -> str:
    title_cell = "<br/>\n".join([title, *(f"[{label}]" for label in labels)])
    cells = [
        "", "", "",
        course_id,
        class_id,
        title_cell,
        credits,
        capacity,
        enrolled,
        "2",
        "0",
        waiting,
        "<br/>\n".join(schedule),
        "<br/>\n".join(professors),
    ]
    return "<tr>" + "".join(f"<td> {cell} </td>" for cell in cells) + "</tr>"


def page_html(rows: list[str], result_count: int | None = None) -> str:
    count_html = ""
    if result_count is not None:
        count_html = (
            '<span id="formBusca:dataTableGroup">Resultados: '
            f"<span>{result_count}</span></span>"
        )
    return (
        "<html><body><form id=\"formBusca\">"
        f"{count_html}"
        '<table id="formBusca:dataTable"><thead><tr><th>x</th></tr></thead>'
        f'<tbody id="formBusca:dataTable:tb">{"".join(rows)}</tbody>'
        "</table></form></body></html>"
    )


def landing_html(terms: list[str]) -> str:
    options = "".join(f'<option value="{term}">{term}</option>' for term in terms)
    return (
        "<html><body><form id=\"formBusca\">"
        f'<select id="formBusca:selectSemestre">{options}</select>'
        "</form></body></html>"
    )


# ── Fake server ────────────────────────────────────────────────

@dataclass
class FakeCatalog:
    """Serves pages like CAGR: past the last page it repeats the last one."""

    result_count: int
    pages: list[str]

    def page(self, index: int) -> str:
        if not self.pages:
            return page_html([], self.result_count)
        return self.pages[min(index, len(self.pages)) - 1]


@dataclass
class FakeCagr:
    terms: list[str] = field(default_factory=lambda: ["20242", "20241", "20232"])
    catalogs: dict[tuple[str, str], FakeCatalog] = field(default_factory=dict)
    failing: dict[tuple[str, str], int] = field(default_factory=dict)
    prime_status: int = 200
    landing_status: int = 200
    requests: list[tuple[str, str, int]] = field(default_factory=list)
    primes: int = 0
    _ids: count = field(default_factory=count)

    def add(self, campus: int, term: str, pages: list[str], result_count: int) -> None:
        self.catalogs[(str(int(campus)), term)] = FakeCatalog(result_count, pages)

    def fail(self, campus: int, term: str, status: int) -> None:
        self.failing[(str(int(campus)), term)] = status

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(self.landing_status, text=landing_html(self.terms))

        form = dict(parse_qsl(request.content.decode()))
        if not form:
            self.primes += 1
            session_id = next(self._ids)
            return httpx.Response(
                self.prime_status,
                text="<html></html>",
                headers={"Set-Cookie": f"JSESSIONID=s{session_id}; Path=/"},
            )

        if "JSESSIONID" not in request.headers.get("cookie", ""):
            return httpx.Response(403, text="no session")

        key = (form[CAMPUS_FIELD], form[TERM_FIELD])
        page_index = int(form[PAGE_FIELD])
        self.requests.append((key[0], key[1], page_index))

        if key in self.failing:
            return httpx.Response(self.failing[key], text="error")

        catalog = self.catalogs.get(key, FakeCatalog(0, []))
        return httpx.Response(200, text=catalog.page(page_index))

    def pages_requested(self, campus: int, term: str) -> list[int]:
        return [page for c, t, page in self.requests if (c, t) == (str(int(campus)), term)]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig(
        _env_file=None,
        cagr_url=TEST_URL,
        retry_wait_seconds=0,
    )


@pytest.fixture
def fake_cagr() -> FakeCagr:
    return FakeCagr()
