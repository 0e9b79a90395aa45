"""Listing endpoints."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, status

from ...models.domain import EstateSale
from ...schemas.listings import (
    AddressExtractionRequest,
    AddressExtractionResponse,
    ListingParseRequest,
    ListingParseResponse,
    ParsedEstateSaleModel,
)
from ...services.listings import extract_addresses, parse_distance_miles, parse_estate_sales

router = APIRouter(prefix="/listings", tags=["listings"])


@router.post("/parse", response_model=ListingParseResponse, status_code=status.HTTP_200_OK)
def parse_listings(payload: ListingParseRequest) -> ListingParseResponse:
    """Turn a scraped results page into listing records."""
    sales = parse_estate_sales(payload.markdown)
    return ListingParseResponse(
        sales=[
            ParsedEstateSaleModel(**asdict(sale), distance_miles=parse_distance_miles(sale.distance))
            for sale in sales
        ]
    )


@router.post("/addresses", response_model=AddressExtractionResponse, status_code=status.HTTP_200_OK)
def listing_addresses(payload: AddressExtractionRequest) -> AddressExtractionResponse:
    """Pull a routable address out of each scraped listing."""
    sales = [EstateSale(**sale.model_dump()) for sale in payload.sales]
    addresses, unresolved = extract_addresses(sales)
    return AddressExtractionResponse(addresses=addresses, unresolved=unresolved)
