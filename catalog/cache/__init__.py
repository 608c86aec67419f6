"""
Read-through query caching with TTL, coalesced refetch, and in-place mutation.
"""
from .query_cache import QueryCache

__all__ = [
    "QueryCache",
]
