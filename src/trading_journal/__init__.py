"""Trade evaluation engine for a personal trading journal."""

__version__ = "0.1.0"
