"""A small HTTP server for static files and a SQLite-backed users API, with a sample client."""

__version__ = "0.1.0"
__all__ = ["__version__"]