from __future__ import annotations
from abc import ABC, abstractmethod

from mipsync.core.models import DiscussionBatch


class DiscussionAPI(ABC):
    """Cursor-paginated feed of discussion records. Failures raise PaginationError."""

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def fetch_page(self, cursor: str | None = None) -> DiscussionBatch:
        """Fetch the first page, or the page after cursor."""
        raise NotImplementedError

    @abstractmethod
    def fetch_last(self, n: int) -> DiscussionBatch:
        """Fetch the n most recent records in a single request."""
        raise NotImplementedError
