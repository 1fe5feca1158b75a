"""
Review Storage.

Persistence collaborators for the review scheduler:
- ReviewStore: Protocol every backend satisfies
- InMemoryReviewStore: process-local list
- JsonReviewStore: JSON document on disk
- SqliteReviewStore: SQLite table
"""

from .base import ReviewStore
from .factory import get_review_store
from .json_store import JsonReviewStore
from .memory_store import InMemoryReviewStore
from .sqlite_store import SqliteReviewStore

__all__ = [
    "ReviewStore",
    "InMemoryReviewStore",
    "JsonReviewStore",
    "SqliteReviewStore",
    "get_review_store",
]
