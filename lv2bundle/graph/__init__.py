"""Graph package - merged statement index over parsed documents."""

from .index import GraphIndex

__all__ = ['GraphIndex']
