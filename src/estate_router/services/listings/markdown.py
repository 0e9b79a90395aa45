"""Parse scraped estatesales.net search pages into listing records.

A results page is one long markdown document in which every listing starts
with its photo link, e.g.::

    [![Photo](https://picturescdn.estatesales.net/...)](https://www.estatesales.net/MI/Flint/48503/123)
    **Moving Sale in Flint**
    Flint, MI 48503\\
    Oct 17, 2026\\
    Listed by Acme Estate Services\\
    5 miles away\\
    Going on Now!

Each field has its own rule taking the listing block and returning the value
or None.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from ...config import Settings, settings as default_settings
from ...models.domain import EstateSale
from .address import city_state_zip_rule

LISTING_START = re.compile(r"(?=\[!\[.*?\]\(https://picturescdn\.estatesales\.net)")
TITLE = re.compile(r"\*\*(.*?)\*\*")
LISTING_URL = re.compile(r"\]\((https://www\.estatesales\.net/[^)]+)\)")
DATE = re.compile(r"((?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s+\d+(?:,\s+\d+)?)")
COMPANY = re.compile(r"Listed by ([^\\\n]+)")
DISTANCE = re.compile(r"(Less than \d+ miles away|\d+\s+miles?\s+away|Nearby)")
STATUS = re.compile(r"(Going on Now!|Starts Tomorrow!|Ends Today!)")

# Listings with no recognisable distance sort after everything else
UNKNOWN_DISTANCE_MILES = 999
NEARBY_MILES = 2

logger = logging.getLogger(__name__)


def _first_group(pattern: re.Pattern[str], block: str) -> Optional[str]:
    match = pattern.search(block)
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def title_rule(block: str) -> Optional[str]:
    """Bold text, the listing's headline."""
    return _first_group(TITLE, block)


def url_rule(block: str) -> Optional[str]:
    """The last estatesales.net link, which is the listing page itself."""
    urls = LISTING_URL.findall(block)
    return urls[-1] if urls else None


def date_rule(block: str) -> Optional[str]:
    return _first_group(DATE, block)


def company_rule(block: str) -> Optional[str]:
    return _first_group(COMPANY, block)


def distance_rule(block: str) -> Optional[str]:
    return _first_group(DISTANCE, block)


def status_rule(block: str) -> Optional[str]:
    return _first_group(STATUS, block)


def parse_distance_miles(text: Optional[str]) -> int:
    """Whole miles from listing distance text such as "5 miles away" or "Nearby"."""
    if not text:
        return UNKNOWN_DISTANCE_MILES
    lowered = text.lower()
    if "less than" in lowered or "nearby" in lowered:
        match = re.search(r"less than (\d+)", lowered)
        return int(match.group(1)) if match else NEARBY_MILES
    match = re.search(r"(\d+)\s+miles?\s+away", lowered)
    return int(match.group(1)) if match else UNKNOWN_DISTANCE_MILES


def parse_listing(block: str, config: Settings | None = None) -> EstateSale:
    config = config or default_settings
    return EstateSale(
        title=title_rule(block),
        date=date_rule(block),
        address=city_state_zip_rule(block, config),
        url=url_rule(block),
        status=status_rule(block),
        company=company_rule(block),
        distance=distance_rule(block),
        markdown=block,
    )


def parse_estate_sales(markdown: str, config: Settings | None = None) -> list[EstateSale]:
    """Split a search results page into listings, keeping only those with a title.

    Text before the first listing photo is page chrome and is skipped.
    """
    blocks = LISTING_START.split(markdown or "")
    sales: list[EstateSale] = []
    for block in blocks[1:]:
        sale = parse_listing(block, config)
        if not sale.title:
            logger.debug("Skipping listing block with no title")
            continue
        sales.append(sale)
    logger.info(f"Parsed {len(sales)} estate sales from {len(blocks) - 1} listing blocks")
    return sales
