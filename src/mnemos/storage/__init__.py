"""Persistence handles used by agents."""

from .profiles import ProfileStore

__all__ = ["ProfileStore"]
