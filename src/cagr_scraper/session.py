"""Session-bound paginator for one (campus, term) pair.

CagrSession owns one cookie-holding HTTP client and walks the catalog form
in the only order the server accepts:

  UNINITIALIZED -> PRIMED -> COUNTING -> PAGINATING -> DONE

Priming obtains the JSF session cookie. Counting reads the result total
from the probe page; page_count() may be called again while counting and
scrape() reuses the last count. Paginating fetches pages 1..N in order and
stops early when a body repeats the previous one byte for byte, which is how
the server answers page indices past the end. Any failure moves the session to FAILED; a finished
or failed session cannot be reused.
"""

from enum import Enum
from typing import NamedTuple

import httpx

from cagr_scraper.config import ScraperConfig, get_config
from cagr_scraper.errors import (
    PageFetchError,
    ScrapingError,
    SessionInitError,
    SessionStateError,
)
from cagr_scraper.logging import get_logger
from cagr_scraper.models import Campus, Class
from cagr_scraper.pages.search import (
    classes_from_html,
    form_data,
    page_count_for,
    parse_result_count,
)
from cagr_scraper.utils import create_client, send_with_retry

logger = get_logger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    PRIMED = "primed"
    COUNTING = "counting"
    PAGINATING = "paginating"
    DONE = "done"
    FAILED = "failed"


class CampusTermClasses(NamedTuple):
    """Result of one successful scrape."""

    campus: Campus
    term: str
    classes: list[Class]


class CagrSession:
    """One cookie-scoped scrape of the catalog for a single campus and term.

    Use CagrSession.open() to create a primed session:

        async with await CagrSession.open(Campus.FLO, "20241") as session:
            campus, term, classes = await session.scrape()
    """

    def __init__(
        self,
        campus: Campus,
        term: str,
        *,
        config: ScraperConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Bind a session to a (campus, term) pair without touching the network.

        Args:
            campus: Campus whose code is sent in every form submission.
            term: Opaque term token as listed by the term dropdown.
            config: Scraper configuration; defaults to get_config().
            transport: Optional HTTP transport override (tests).
        """
        self.campus = campus
        self.term = term
        self.config = config or get_config()
        self.state = SessionState.UNINITIALIZED
        self._pages: int | None = None
        self._client = create_client(self.config, transport)
        self._log = logger.bind(campus=str(campus), term=term)

    @classmethod
    async def open(
        cls,
        campus: Campus,
        term: str,
        *,
        config: ScraperConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "CagrSession":
        """Create a session and prime it with the server's cookies.

        Raises:
            SessionInitError: If the priming request fails.
        """
        session = cls(campus, term, config=config, transport=transport)
        try:
            await session.prime()
        except BaseException:
            await session.aclose()
            raise
        return session

    async def __aenter__(self) -> "CagrSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            expected = " or ".join(state.value for state in states)
            raise SessionStateError(
                f"session for {self.campus}/{self.term} is {self.state.value}, "
                f"expected {expected}"
            )

    async def _post(self, data: dict[str, str] | None = None) -> httpx.Response:
        return await send_with_retry(
            self._client, self.config, "POST", self.config.cagr_url, data
        )

    async def prime(self) -> None:
        """Send the empty form submission that makes the server issue cookies.

        Raises:
            SessionInitError: If the request fails or returns an error status.
        """
        self._require(SessionState.UNINITIALIZED)
        try:
            await self._post()
        except ScrapingError as e:
            self.state = SessionState.FAILED
            self._log.error("session_init_failed", error=str(e))
            raise SessionInitError(
                f"priming {self.campus}/{self.term} failed: {e}"
            ) from e

        self.state = SessionState.PRIMED
        self._log.debug("session_primed", cookies=len(self._client.cookies))

    async def page_count(self) -> int:
        """Ask the server how many result pages exist for this campus and term.

        Submits the probe page index (page 1 does not carry the result
        count) and divides the count by the page size, rounding up. A missing
        count yields 0 pages.

        Raises:
            PageFetchError: If the probe request fails.
        """
        self._require(SessionState.PRIMED, SessionState.COUNTING)
        self.state = SessionState.COUNTING

        probe = self.config.probe_page_index
        try:
            response = await self._post(form_data(self.campus, self.term, probe))
        except ScrapingError as e:
            self.state = SessionState.FAILED
            raise PageFetchError(
                f"page count probe for {self.campus}/{self.term} failed: {e}",
                page_index=probe,
            ) from e

        result_count = parse_result_count(response.text)
        pages = page_count_for(result_count, self.config.page_size)
        self._pages = pages
        self._log.info("page_count", results=result_count, pages=pages)
        return pages

    async def fetch_page(self, page_index: int) -> httpx.Response:
        """Fetch one results page.

        Raises:
            PageFetchError: If the request fails.
        """
        self._require(SessionState.PAGINATING)
        try:
            return await self._post(form_data(self.campus, self.term, page_index))
        except ScrapingError as e:
            self.state = SessionState.FAILED
            raise PageFetchError(
                f"page {page_index} of {self.campus}/{self.term} failed: {e}",
                page_index=page_index,
            ) from e

    async def scrape(self) -> CampusTermClasses:
        """Fetch and parse every results page of this session.

        Pages are requested in increasing order. Pagination stops after the
        last page index, or earlier when a page body is identical to the one
        before it. Classes keep page order.

        Raises:
            PageFetchError: If a page request fails.
            ParseError: If a page does not match the table schema.
            SessionStateError: If the session was not primed or was already used.
        """
        self._require(SessionState.PRIMED, SessionState.COUNTING)
        pages = self._pages if self._pages is not None else await self.page_count()
        self.state = SessionState.PAGINATING

        classes: list[Class] = []
        previous: bytes | None = None
        try:
            for page_index in range(1, pages + 1):
                response = await self.fetch_page(page_index)
                body = response.content

                # the server answers indices past the end with the last page again
                if body == previous:
                    self._log.info("pagination_repeated_page", page=page_index)
                    break

                page_classes = classes_from_html(response.text)
                classes.extend(page_classes)
                self._log.info(
                    "page_scraped",
                    page=page_index,
                    pages=pages,
                    classes=len(page_classes),
                )
                previous = body
        except Exception:
            self.state = SessionState.FAILED
            raise

        self.state = SessionState.DONE
        self._log.info("session_done", classes=len(classes))
        return CampusTermClasses(self.campus, self.term, classes)
