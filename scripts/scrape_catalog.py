"""Scrape the most recent CAGR terms and write one JSON file per campus/term.

Standalone CLI script. Discovers the terms offered by the catalog, scrapes
every (term, campus) pair concurrently and writes the classes of each
successful pair to <output-dir>/<CAMPUS>-<term>.json. Pairs without classes
produce no file.

Run with: python scripts/scrape_catalog.py
Fewer terms: python scripts/scrape_catalog.py --terms 1
Campuses:    python scripts/scrape_catalog.py --campus FLO --campus JOI
JSON logs:   python scripts/scrape_catalog.py --json-logs

Valid campus names: EAD, FLO, JOI, CBS, ARA, BLN

Exit codes:
  0 = every session succeeded
  1 = term discovery failed, or at least one session failed
"""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add src/ to path so the script runs from a plain checkout
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from cagr_scraper.config import get_config  # noqa: E402
from cagr_scraper.errors import DiscoveryError  # noqa: E402
from cagr_scraper.logging import get_logger, setup_logging  # noqa: E402
from cagr_scraper.models import Campus  # noqa: E402
from cagr_scraper.orchestrator import scrape_last_n_terms  # noqa: E402
from cagr_scraper.storage import persist_outcomes  # noqa: E402

DEFAULT_CAMPI = [Campus.FLO, Campus.JOI, Campus.CBS, Campus.ARA, Campus.BLN]
DEFAULT_TERMS = 3

log = get_logger("scrape_catalog")


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Scrape class offerings from the UFSC CAGR catalog.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--terms",
        type=int,
        default=DEFAULT_TERMS,
        help=f"Number of most recent terms to scrape (default: {DEFAULT_TERMS}).",
    )
    parser.add_argument(
        "--campus",
        type=Campus.parse,
        action="append",
        dest="campi",
        help="Campus to scrape; repeat for several (default: FLO JOI CBS ARA BLN).",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the JSON files (default: CAGR_OUTPUT_DIR or data/cagr).",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines instead of console output.",
    )
    args = parser.parse_args()
    if args.terms < 0:
        parser.error("--terms must be >= 0")
    return args


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    output_dir = args.output_dir or config.output_dir
    campi = args.campi or DEFAULT_CAMPI

    log.info(
        "scrape_started",
        terms=args.terms,
        campi=[str(campus) for campus in campi],
        output_dir=output_dir,
    )

    try:
        outcomes = await scrape_last_n_terms(args.terms, campi, config=config)
    except DiscoveryError as e:
        log.error("scrape_aborted", error=str(e))
        return 1

    written = persist_outcomes(outcomes, output_dir)
    failed = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in failed:
        log.error(
            "pair_failed",
            campus=str(outcome.campus),
            term=outcome.term,
            error=str(outcome.error),
        )

    log.info(
        "scrape_finished",
        sessions=len(outcomes),
        files=len(written),
        failed=len(failed),
    )
    return 1 if failed else 0


if __name__ == "__main__":
    args = _parse_args()
    config = get_config()
    setup_logging(json_output=args.json_logs or config.log_json, log_level=config.log_level)
    sys.exit(asyncio.run(main(args)))
