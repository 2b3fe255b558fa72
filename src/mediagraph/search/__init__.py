"""Remote search API client."""

from .client import SearchClient, SearchKind

__all__ = ["SearchClient", "SearchKind"]
