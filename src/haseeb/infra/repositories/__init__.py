"""Repository implementations."""

from .habit import SQLModelLogStore

__all__ = ["SQLModelLogStore"]
