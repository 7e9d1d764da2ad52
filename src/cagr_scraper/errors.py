"""Error hierarchy for catalog scraping.

Network-level failures are classified as transient (may succeed on retry) or
permanent, so tenacity retry policies can pick them out by type. Session and
parse failures are raised to the orchestrator, which records them per
(campus, term) pair instead of letting them abort sibling sessions.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    async def fetch_page(session: CagrSession, page_index: int):
        ...
"""


class ScrapingError(Exception):
    """Base exception for all scraping errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry.

    Examples: connection resets, read timeouts, 503 Service Unavailable.
    """

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry.

    Examples: 404 on the catalog endpoint, 403 from an expired session.
    """

    pass


class SessionInitError(ScrapingError):
    """The priming request did not complete, so no session cookies exist."""

    pass


class PageFetchError(ScrapingError):
    """A page-count probe or results page request failed."""

    def __init__(self, message: str, page_index: int | None = None) -> None:
        super().__init__(message)
        self.page_index = page_index


class DiscoveryError(ScrapingError):
    """The term list could not be read from the catalog landing page.

    Fatal to the whole run: without terms there is nothing to fan out.
    """

    pass


class SessionStateError(ScrapingError):
    """A session operation was called out of order or after completion."""

    pass


class ParseError(PermanentError):
    """Response markup does not match the known table schema."""

    pass


class TableNotFound(ParseError):
    """The results <tbody> is missing from the page.

    Either the session was not accepted by the server or the page layout
    changed. Never treated as an empty page.
    """

    def __init__(self, table_id: str) -> None:
        super().__init__(f'<tbody id="{table_id}"> not found')
        self.table_id = table_id


class NoCourseTitle(ParseError):
    """The title cell of a row is empty."""

    def __init__(self) -> None:
        super().__init__("no course title")


class InvalidTime(ParseError):
    """A schedule line does not follow `<weekday>.<HHMM>-<credits> / <place>`."""

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"invalid time {value!r}: {reason}")
        self.value = value
        self.reason = reason


class InvalidNumber(ParseError):
    """A numeric cell holds something other than an unsigned integer."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"invalid {field} {value!r}: expected an unsigned integer")
        self.field = field
        self.value = value


class MalformedRow(ParseError):
    """A table row has fewer cells than the schema requires."""

    def __init__(self, cell_count: int, expected: int) -> None:
        super().__init__(f"row has {cell_count} cells, expected at least {expected}")
        self.cell_count = cell_count
        self.expected = expected
