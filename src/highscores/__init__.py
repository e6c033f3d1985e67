"""High scores API for the portfolio mini-games."""

__version__ = "1.0.0"
