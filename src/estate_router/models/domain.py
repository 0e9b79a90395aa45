"""Domain models for geocoded stops and scraped estate-sale listings."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS-84 position in degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Stop:
    """An input address paired with the coordinate it geocoded to."""

    address: str
    coordinate: Coordinate


@dataclass(slots=True)
class EstateSale:
    """Represents a scraped estate-sale listing."""

    title: Optional[str] = None
    date: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    status: Optional[str] = None
    company: Optional[str] = None
    distance: Optional[str] = None
    markdown: Optional[str] = None
