"""CLI command modules."""

from .convert import ConvertCommand

__all__ = ["ConvertCommand"]
