"""CAGR course catalog scraper.

Harvests class offerings from UFSC's CAGR catalog: one cookie-scoped
session per (campus, term), run concurrently, with each results row parsed
into typed models.
"""

from cagr_scraper.models import Campus, Class, Course, TimeSlot, Weekday
from cagr_scraper.orchestrator import (
    SessionOutcome,
    available_terms,
    scrape_last_n_terms,
)
from cagr_scraper.session import CagrSession

__all__ = [
    "CagrSession",
    "Campus",
    "Class",
    "Course",
    "SessionOutcome",
    "TimeSlot",
    "Weekday",
    "available_terms",
    "scrape_last_n_terms",
]
