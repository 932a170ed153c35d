"""Song Catalog - a personal catalog of available and placed songs."""

__version__ = "0.1.0"
