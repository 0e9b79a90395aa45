"""Address extraction from scraped estate-sale listings.

Scraped listing markdown puts the street and the city on separate lines joined
by markdown hard breaks (runs of backslashes), e.g.::

    123 Maple Drive\\\\
    Grand Blanc, MI 48439

Each rule below takes the listing text and returns a normalised address or
None, and ``extract_address`` tries them in order.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional, Sequence

from ...config import Settings, settings as default_settings
from ...models.domain import EstateSale

STREET_SUFFIX = (
    r"(?:pkwy|parkway|drive|dr\.?|road|rd\.?|street|st\.?|avenue|ave\.?|lane|ln\.?|court|ct\.?"
    r"|boulevard|blvd\.?|circle|cir\.?|way|place|pl\.?)"
)
STREET = rf"\d+\s+[^\\,\n]+{STREET_SUFFIX}"
CITY = r"[A-Z][a-z]+(?: [A-Z][a-z]+){0,2}"

logger = logging.getLogger(__name__)

AddressRule = Callable[[str, Settings], Optional[str]]


def _states_pattern(config: Settings) -> str:
    names = config.listing_state_names or (config.listing_state,)
    # Longest first: "MI" would otherwise match the start of "Michigan"
    return "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True))


def _join(*parts: str, zip_code: str | None = None) -> str:
    address = ", ".join(part.strip() for part in parts if part and part.strip())
    if zip_code:
        address += f" {zip_code}"
    return address


def street_address_rule(text: str, config: Settings) -> Optional[str]:
    """Street line, hard break, then "City, ST 12345"."""
    pattern = rf"({STREET})(?:\s*\\{{2,}})+\s*([^\\,\n]+),?\s*({_states_pattern(config)})\b\s*(\d{{5}})?"
    match = re.search(pattern, text, re.IGNORECASE)
    if not match:
        return None
    street, city, state, zip_code = match.groups()
    return _join(street, city, state or config.listing_state, zip_code=zip_code)


def city_state_zip_rule(text: str, config: Settings) -> Optional[str]:
    """City, state and ZIP with no street, as used by appointment-only sales."""
    # City words must be capitalised so running prose before the city is not captured
    pattern = rf"({CITY}),?\s*(?i:({_states_pattern(config)}))\b\s*(\d{{5}})"
    match = re.search(pattern, text)
    if not match:
        return None
    city, state, zip_code = match.groups()
    return _join(_trim_to_known_city(city, config), state or config.listing_state, zip_code=zip_code)


def _trim_to_known_city(city: str, config: Settings) -> str:
    # "Sale Grand Blanc" -> "Grand Blanc"
    for known in sorted(config.listing_known_cities, key=len, reverse=True):
        if city.lower() == known.lower() or city.lower().endswith(" " + known.lower()):
            return known
    return city


def known_city_rule(text: str, config: Settings) -> Optional[str]:
    """A street or bare city name near one of the configured local cities."""
    states = _states_pattern(config)
    for city in config.listing_known_cities:
        escaped = re.escape(city)
        street_match = re.search(rf"({STREET})[^\n]*?{escaped}", text, re.IGNORECASE)
        if street_match:
            return _join(street_match.group(1), city, config.listing_state)

        city_match = re.search(rf"{escaped},?\s*({states})\b\s*(\d{{5}})?", text, re.IGNORECASE)
        if city_match:
            state, zip_code = city_match.groups()
            return _join(city, state or config.listing_state, zip_code=zip_code)
    return None


MARKDOWN_RULES: tuple[AddressRule, ...] = (
    street_address_rule,
    city_state_zip_rule,
    known_city_rule,
)


def extract_address(sale: EstateSale, config: Settings | None = None) -> Optional[str]:
    """Best address for a listing: its parsed field, else the first markdown rule that matches."""
    config = config or default_settings
    if sale.address and sale.address.strip():
        return sale.address.strip()
    if not sale.markdown:
        return None
    for rule in MARKDOWN_RULES:
        address = rule(sale.markdown, config)
        if address:
            logger.debug(f"{rule.__name__} matched '{address}' for sale {sale.title!r}")
            return address
    logger.info(f"No address pattern matched for sale {sale.title!r}")
    return None


def extract_addresses(
    sales: Sequence[EstateSale], config: Settings | None = None
) -> tuple[list[str], list[str]]:
    """Addresses for every listing that has one, plus titles of listings that do not."""
    addresses: list[str] = []
    unresolved: list[str] = []
    for position, sale in enumerate(sales, start=1):
        address = extract_address(sale, config)
        if address:
            addresses.append(address)
        else:
            unresolved.append(sale.title or f"Sale #{position}")
    return addresses, unresolved
