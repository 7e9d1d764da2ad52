"""Scraper configuration loaded from environment variables.

Every field can be overridden with a `CAGR_`-prefixed environment variable,
e.g. `CAGR_RETRY_ATTEMPTS=3` or `CAGR_LOG_JSON=true`.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ScraperConfig(BaseSettings):
    """Scraper configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # CAGR settings (JSF form, no API exists)
    cagr_url: str = Field(
        default="https://cagr.sistemas.ufsc.br/modules/comunidade/cadastroTurmas/",
        description="Catalog endpoint; the landing page and the search form share it",
    )
    page_size: int = Field(
        default=50,
        ge=1,
        description="Rows per results page, fixed by the server",
    )
    probe_page_index: int = Field(
        default=2,
        ge=1,
        description="Page index used to read the result count (page 1 lacks it)",
    )

    # HTTP settings
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to every request",
    )
    user_agent: str = Field(
        default="cagr-scraper/0.1 (+https://cagr.sistemas.ufsc.br)",
        description="User-Agent header sent to the catalog",
    )
    retry_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per request on transient failures (1 disables retry)",
    )
    retry_wait_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Fixed wait between retry attempts",
    )

    # Fan-out settings
    max_concurrent_sessions: int = Field(
        default=0,
        ge=0,
        description="Upper bound on sessions running at once (0 = unbounded)",
    )

    # Paths
    output_dir: str = Field(
        default="data/cagr",
        description="Directory where per campus/term JSON files are written",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "CAGR_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: ScraperConfig | None = None


def get_config() -> ScraperConfig:
    """Get the scraper configuration singleton.

    Returns:
        ScraperConfig: Scraper configuration instance
    """
    global _config
    if _config is None:
        _config = ScraperConfig()
    return _config
