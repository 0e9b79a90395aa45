import pytest

from estate_router.config import Settings
from estate_router.services.listings import parse_distance_miles, parse_estate_sales
from estate_router.services.listings.markdown import (
    company_rule,
    date_rule,
    distance_rule,
    status_rule,
    title_rule,
    url_rule,
)

CONFIG = Settings(_env_file=None)

MOVING_SALE = (
    "[![Moving sale photo](https://picturescdn.estatesales.net/123/photo.jpg)]"
    "(https://www.estatesales.net/MI/Flint/48503/111)\n"
    "**Moving Sale in Flint**\\\n"
    "Flint, MI 48503\\\n"
    "Oct 17, 2026\\\n"
    "Listed by Acme Estate Services\\\n"
    "5 miles away\\\n"
    "Going on Now!\n\n"
)
BARN_SALE = (
    "[![Barn photo](https://picturescdn.estatesales.net/456/photo.jpg)]"
    "(https://www.estatesales.net/MI/Davison/48423/222)\n"
    "**Barn Sale**\n"
    "Davison, MI 48423\n"
    "Nov 1\n"
    "Nearby\n"
    "Starts Tomorrow!\n\n"
)
UNTITLED = (
    "[![Untitled](https://picturescdn.estatesales.net/789/photo.jpg)]"
    "(https://www.estatesales.net/MI/Burton/48519/333)\n"
    "Burton, MI 48519\n"
)
PAGE = "# Estate Sales near Flint, MI 48503\n\nSearch filters\n\n" + MOVING_SALE + BARN_SALE + UNTITLED


def test_title_rule():
    assert title_rule(MOVING_SALE) == "Moving Sale in Flint"
    assert title_rule(UNTITLED) is None


def test_url_rule_takes_last_listing_link():
    block = "[a](https://www.estatesales.net/companies/1) and [b](https://www.estatesales.net/MI/Flint/48503/111)"

    assert url_rule(block) == "https://www.estatesales.net/MI/Flint/48503/111"
    assert url_rule("no links here") is None


def test_date_rule():
    assert date_rule(MOVING_SALE) == "Oct 17, 2026"
    assert date_rule(BARN_SALE) == "Nov 1"
    assert date_rule("Sometime soon") is None


def test_company_rule_stops_at_hard_break():
    assert company_rule(MOVING_SALE) == "Acme Estate Services"
    assert company_rule(BARN_SALE) is None


def test_distance_and_status_rules():
    assert distance_rule(MOVING_SALE) == "5 miles away"
    assert distance_rule(BARN_SALE) == "Nearby"
    assert distance_rule("Less than 1 miles away") == "Less than 1 miles away"
    assert status_rule(MOVING_SALE) == "Going on Now!"
    assert status_rule(BARN_SALE) == "Starts Tomorrow!"
    assert status_rule(UNTITLED) is None


@pytest.mark.parametrize(
    "text, miles",
    [
        ("5 miles away", 5),
        ("1 mile away", 1),
        ("Less than 1 miles away", 1),
        ("Nearby", 2),
        ("far far away", 999),
        ("", 999),
        (None, 999),
    ],
)
def test_parse_distance_miles(text, miles):
    assert parse_distance_miles(text) == miles


def test_parse_estate_sales_fills_every_field():
    sales = parse_estate_sales(PAGE, CONFIG)

    assert [sale.title for sale in sales] == ["Moving Sale in Flint", "Barn Sale"]
    moving = sales[0]
    assert moving.address == "Flint, MI 48503"
    assert moving.url == "https://www.estatesales.net/MI/Flint/48503/111"
    assert moving.date == "Oct 17, 2026"
    assert moving.company == "Acme Estate Services"
    assert moving.distance == "5 miles away"
    assert moving.status == "Going on Now!"
    assert moving.markdown == MOVING_SALE
    assert sales[1].address == "Davison, MI 48423"


def test_parse_estate_sales_requires_title():
    assert parse_estate_sales("# Header only\n\n" + UNTITLED, CONFIG) == []


def test_parse_estate_sales_without_listings():
    assert parse_estate_sales("Nothing scheduled this week.", CONFIG) == []
    assert parse_estate_sales("", CONFIG) == []
