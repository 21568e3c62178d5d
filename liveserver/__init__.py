"""Local development server with live reload."""

__version__ = "0.3.0"
