from __future__ import annotations
from abc import ABC, abstractmethod

from mipsync.core.models import GitFile


class DocumentSource(ABC):
    """A version-controlled tree of proposal documents."""

    @abstractmethod
    def pull(self, remote: str, branch: str) -> None:
        """Refresh the local snapshot from remote/branch. Raises TransportError."""
        raise NotImplementedError

    @abstractmethod
    def list_files(self) -> list[GitFile]:
        """Return the tracked proposal files in a stable order. Raises TransportError."""
        raise NotImplementedError

    @abstractmethod
    def read_file(self, filename: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def save_meta_vars(self) -> None:
        """Record last-sync bookkeeping (head commit, sync time)."""
        raise NotImplementedError
