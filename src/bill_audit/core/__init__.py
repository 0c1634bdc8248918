"""Core data types shared across the package."""

from .types import Document, Failure, Result, Success

__all__ = ["Document", "Failure", "Result", "Success"]
