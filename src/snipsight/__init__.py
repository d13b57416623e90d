"""SnipSight: snippet browsing with live in-document preview."""

__version__ = "0.1.0"

__all__ = ["__version__"]
