"""JSON persistence of scraped classes, one file per (campus, term)."""

import json
from pathlib import Path
from typing import Iterable

from cagr_scraper.logging import get_logger
from cagr_scraper.orchestrator import SessionOutcome

log = get_logger(__name__)


_UNSAFE_TERM_CHARS = frozenset({"/", "\\", "\0"})


def output_path(output_dir: str | Path, outcome: SessionOutcome) -> Path:
    """File name for an outcome, e.g. data/cagr/FLO-20241.json.

    Raises:
        ValueError: If the term contains a path separator.
    """
    if _UNSAFE_TERM_CHARS.intersection(outcome.term):
        raise ValueError(f"term {outcome.term!r} cannot be used in a file name")
    return Path(output_dir) / f"{outcome.campus}-{outcome.term}.json"


def write_classes(outcome: SessionOutcome, output_dir: str | Path) -> Path | None:
    """Write the classes of a successful outcome as a JSON array.

    Returns:
        The written path, or None when the class list is empty.

    Raises:
        ValueError: If the outcome is a failure.
    """
    if not outcome.ok:
        raise ValueError(f"cannot persist failed outcome {outcome.campus}/{outcome.term}")
    if not outcome.classes:
        log.info("persist_skipped", campus=str(outcome.campus), term=outcome.term)
        return None

    path = output_path(output_dir, outcome)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = [cls.model_dump(mode="json") for cls in outcome.classes]
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    log.info("classes_written", path=str(path), classes=len(outcome.classes))
    return path


def persist_outcomes(
    outcomes: Iterable[SessionOutcome], output_dir: str | Path
) -> list[Path]:
    """Write every successful, non-empty outcome; failures are skipped."""
    written = []
    for outcome in outcomes:
        if not outcome.ok:
            continue
        path = write_classes(outcome, output_dir)
        if path is not None:
            written.append(path)
    return written
