"""Fan-out of catalog scrapes over terms and campuses.

One CagrSession runs per (term, campus) pair. All sessions run concurrently
on the event loop and share nothing: each has its own client and cookies.
A failing session is recorded in its SessionOutcome and never cancels its
siblings.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Iterable

import httpx

from cagr_scraper.config import ScraperConfig, get_config
from cagr_scraper.errors import DiscoveryError, ScrapingError
from cagr_scraper.logging import get_logger
from cagr_scraper.models import Campus, Class
from cagr_scraper.pages.search import parse_terms
from cagr_scraper.session import CagrSession, CampusTermClasses
from cagr_scraper.utils import create_client, send_with_retry

log = get_logger(__name__)


@dataclass
class SessionOutcome:
    """Success or failure of the scrape of one (campus, term) pair."""

    campus: Campus
    term: str
    classes: list[Class] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> CampusTermClasses:
        """Return the scraped tuple, or raise the error the session failed with."""
        if self.error is not None:
            raise self.error
        return CampusTermClasses(self.campus, self.term, self.classes)


async def available_terms(
    *,
    config: ScraperConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[str]:
    """List the term tokens offered by the catalog, most recent first.

    Raises:
        DiscoveryError: If the landing page cannot be fetched or lists no terms.
    """
    config = config or get_config()
    async with create_client(config, transport) as client:
        try:
            response = await send_with_retry(client, config, "GET", config.cagr_url)
        except ScrapingError as e:
            log.error("term_discovery_failed", url=config.cagr_url, error=str(e))
            raise DiscoveryError(f"could not load {config.cagr_url}: {e}") from e

    terms = parse_terms(response.text)
    if not terms:
        log.error("term_discovery_failed", url=config.cagr_url, error="no terms")
        raise DiscoveryError(f"no terms found at {config.cagr_url}")

    log.info("terms_discovered", count=len(terms), latest=terms[0])
    return terms


async def scrape_session(
    campus: Campus,
    term: str,
    *,
    config: ScraperConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SessionOutcome:
    """Run one complete session and capture its result or error."""
    try:
        async with await CagrSession.open(
            campus, term, config=config, transport=transport
        ) as session:
            _, _, classes = await session.scrape()
    except Exception as e:
        log.error(
            "session_failed",
            campus=str(campus),
            term=term,
            error=str(e),
            error_type=type(e).__name__,
        )
        return SessionOutcome(campus, term, error=e)

    return SessionOutcome(campus, term, classes=classes)


async def scrape_terms(
    terms: Iterable[str],
    campi: Iterable[Campus],
    *,
    config: ScraperConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SessionOutcome]:
    """Scrape every (term, campus) pair concurrently.

    Outcomes are returned in completion order, not submission order.
    """
    config = config or get_config()
    pairs = [(term, campus) for term in terms for campus in campi]

    limit = config.max_concurrent_sessions
    semaphore = asyncio.Semaphore(limit) if limit else None

    async def run(term: str, campus: Campus) -> SessionOutcome:
        if semaphore is None:
            return await scrape_session(
                campus, term, config=config, transport=transport
            )
        async with semaphore:
            return await scrape_session(
                campus, term, config=config, transport=transport
            )

    log.info("fan_out_started", sessions=len(pairs), max_concurrent=limit or None)

    outcomes: list[SessionOutcome] = []
    tasks = [run(term, campus) for term, campus in pairs]
    for next_done in asyncio.as_completed(tasks):
        outcomes.append(await next_done)

    failed = sum(1 for outcome in outcomes if not outcome.ok)
    log.info("fan_out_finished", sessions=len(outcomes), failed=failed)
    return outcomes


async def scrape_last_n_terms(
    n: int,
    campi: Iterable[Campus],
    *,
    config: ScraperConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SessionOutcome]:
    """Scrape the `n` most recent terms for every given campus.

    The term list is taken in the order the catalog offers it, assumed to be
    most recent first.

    Raises:
        ValueError: If `n` is negative or no campus is given.
        DiscoveryError: If the term list cannot be loaded.
    """
    if n < 0:
        raise ValueError(f"term count must be >= 0, got {n}")
    campi = list(dict.fromkeys(campi))
    if not campi:
        raise ValueError("at least one campus is required")

    config = config or get_config()
    terms = (await available_terms(config=config, transport=transport))[:n]
    return await scrape_terms(terms, campi, config=config, transport=transport)
