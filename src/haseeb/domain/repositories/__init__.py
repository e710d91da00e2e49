"""Repository protocols."""

from .habit import LogStore

__all__ = ["LogStore"]
