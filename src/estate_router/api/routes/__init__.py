"""Route group exports."""

from . import health, listings, routes

__all__ = ["routes", "listings", "health"]
