"""Listing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class EstateSaleModel(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    status: Optional[str] = None
    company: Optional[str] = None
    distance: Optional[str] = None
    markdown: Optional[str] = Field(default=None, description="Scraped listing page markdown.")


class AddressExtractionRequest(BaseModel):
    sales: List[EstateSaleModel] = Field(..., min_length=1)


class AddressExtractionResponse(BaseModel):
    addresses: List[str]
    unresolved: List[str] = Field(..., description="Titles of sales with no recognisable address.")


class ListingParseRequest(BaseModel):
    markdown: str = Field(..., min_length=1, description="Markdown of a scraped estatesales.net results page.")


class ParsedEstateSaleModel(EstateSaleModel):
    distance_miles: int = Field(..., description="Whole miles parsed from the distance text, 999 when unknown.")


class ListingParseResponse(BaseModel):
    sales: List[ParsedEstateSaleModel]
