"""Shared HTTP helpers: client construction and retry classification."""

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from cagr_scraper.config import ScraperConfig
from cagr_scraper.errors import PermanentError, TransientError
from cagr_scraper.logging import get_logger

log = get_logger(__name__)


def create_client(
    config: ScraperConfig, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Create an async HTTP client for one scrape.

    The client's cookie jar holds the server-side session, so a client
    must never be shared between two (campus, term) scrapes.

    Args:
        config: Scraper configuration (timeout, user agent).
        transport: Optional transport override, e.g. httpx.MockTransport in tests.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.user_agent},
        follow_redirects=True,
        transport=transport,
    )


async def _send_once(
    client: httpx.AsyncClient, method: str, url: str, data: dict[str, str] | None
) -> httpx.Response:
    try:
        response = await client.request(method, url, data=data)
    except httpx.TransportError as e:
        log.warning("request_failed", method=method, url=url, error=str(e))
        raise TransientError(f"{method} {url} failed: {e}") from e

    if response.status_code >= 500:
        raise TransientError(f"{method} {url} returned {response.status_code}")
    if response.is_error:
        raise PermanentError(f"{method} {url} returned {response.status_code}")
    return response


async def send_with_retry(
    client: httpx.AsyncClient,
    config: ScraperConfig,
    method: str,
    url: str,
    data: dict[str, str] | None = None,
) -> httpx.Response:
    """Send a request and return the successful response.

    Callers read `response.content` when they need the exact bytes and
    `response.text` for parsing.

    Transient failures (network errors, 5xx) are retried up to
    `config.retry_attempts` attempts in total; the default of one attempt
    disables retry.

    Raises:
        TransientError: Network failure or 5xx after the last attempt.
        PermanentError: Any other non-success status.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.retry_attempts),
        wait=wait_fixed(config.retry_wait_seconds),
        retry=retry_if_exception_type(TransientError),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                log.info(
                    "request_retry",
                    method=method,
                    url=url,
                    attempt=attempt.retry_state.attempt_number,
                )
            return await _send_once(client, method, url, data)
