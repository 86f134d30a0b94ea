"""Adapters - I/O implementations of ports."""

from .caterfind_api import CaterfindAPIAdapter

__all__ = [
    "CaterfindAPIAdapter",
]
