from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable

from mipsync.core.models import Proposal


class ProposalRepo(ABC):
    @abstractmethod
    def get_all(self) -> dict[str, Proposal]:
        """Return every stored proposal keyed by filename."""
        raise NotImplementedError

    @abstractmethod
    def create(self, proposal: Proposal) -> Proposal:
        """Insert a proposal and return it with its assigned id."""
        raise NotImplementedError

    @abstractmethod
    def update(self, proposal_id: str, proposal: Proposal) -> Proposal:
        """Replace the stored fields of proposal_id. Raises StoreError if missing."""
        raise NotImplementedError

    @abstractmethod
    def delete_many(self, ids: Iterable[str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def group_by_relation(self) -> list[Proposal]:
        """Return the proposals that at least one subproposal names as its father."""
        raise NotImplementedError

    @abstractmethod
    def set_father_references(self, ids: list[str]) -> list[bool]:
        """Mark each id as a father and set father_id on its subproposals.

        Returns one flag per id, False when the id is unknown.
        """
        raise NotImplementedError

    @abstractmethod
    def unset_fathers(self, ids: list[str]) -> None:
        """Clear mip_father on each id. Unknown ids are ignored."""
        raise NotImplementedError

    @abstractmethod
    def clear_father_ids(self, ids: list[str]) -> None:
        """Clear father_id on each id. Unknown ids are ignored."""
        raise NotImplementedError

    @abstractmethod
    def update_subproposal_count(self, proposal_id: str, count: int) -> None:
        raise NotImplementedError


class DiscussionRepo(ABC):
    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def create(self, edges: list[dict[str, Any]]) -> int:
        """Store a batch of discussion edges, skipping ones already stored. Returns the number added."""
        raise NotImplementedError


class MetaRepo(ABC):
    @abstractmethod
    def save_meta(self, values: dict[str, str]) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_meta(self) -> dict[str, str]:
        raise NotImplementedError


def edge_key(edge: dict[str, Any]) -> str | None:
    """Return the remote id of a discussion edge (`{"node": {"id": ...}}` or a bare node)."""
    node = edge.get("node", edge) if isinstance(edge, dict) else None
    if isinstance(node, dict) and node.get("id") is not None:
        return str(node["id"])
    return None
