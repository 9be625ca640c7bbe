"""Command line interface for sysnav."""

from .main import main

__all__ = ["main"]
