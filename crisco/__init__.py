"""A small in-memory URL shortener: code generation, request parsing, handlers and a TCP server."""

__version__ = "0.1.0"
__all__ = ["__version__"]