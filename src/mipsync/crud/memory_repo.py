from dataclasses import dataclass, field
from typing import Any, Iterable
from uuid import uuid4

from mipsync.core.models import Proposal
from mipsync.crud.repo import DiscussionRepo, MetaRepo, ProposalRepo, edge_key
from mipsync.errors import StoreError


@dataclass
class MemoryProposalRepo(ProposalRepo):
    _docs: dict[str, Proposal] = field(default_factory=dict)   # keyed by id

    def get_all(self) -> dict[str, Proposal]:
        return {p.filename: p.model_copy(deep=True) for p in self._docs.values()}

    def create(self, proposal: Proposal) -> Proposal:
        saved = proposal.model_copy(update={"id": uuid4().hex}, deep=True)
        self._docs[saved.id] = saved
        return saved.model_copy(deep=True)

    def update(self, proposal_id: str, proposal: Proposal) -> Proposal:
        if proposal_id not in self._docs:
            raise StoreError(f"Proposal {proposal_id} not found")
        saved = proposal.model_copy(update={"id": proposal_id}, deep=True)
        self._docs[proposal_id] = saved
        return saved.model_copy(deep=True)

    def delete_many(self, ids: Iterable[str]) -> None:
        for proposal_id in ids:
            self._docs.pop(proposal_id, None)

    def group_by_relation(self) -> list[Proposal]:
        keys = {(p.language, p.proposal) for p in self._docs.values() if p.proposal}
        fathers = [p for p in self._docs.values() if p.mip_name and (p.language, p.mip_name) in keys]
        return [p.model_copy(deep=True) for p in sorted(fathers, key=lambda p: p.filename)]

    def set_father_references(self, ids: list[str]) -> list[bool]:
        flags = []
        for proposal_id in ids:
            father = self._docs.get(proposal_id)
            if father is None:
                flags.append(False)
                continue
            father.mip_father = True
            for p in self._docs.values():
                if p.id != father.id and p.language == father.language and p.proposal == father.mip_name:
                    p.father_id = father.id
            flags.append(True)
        return flags

    def unset_fathers(self, ids: list[str]) -> None:
        for proposal_id in ids:
            if proposal_id in self._docs:
                self._docs[proposal_id].mip_father = False

    def clear_father_ids(self, ids: list[str]) -> None:
        for proposal_id in ids:
            if proposal_id in self._docs:
                self._docs[proposal_id].father_id = None

    def update_subproposal_count(self, proposal_id: str, count: int) -> None:
        if proposal_id not in self._docs:
            raise StoreError(f"Proposal {proposal_id} not found")
        self._docs[proposal_id].subproposals_count = count


@dataclass
class MemoryDiscussionRepo(DiscussionRepo):
    _edges: list[dict[str, Any]] = field(default_factory=list)

    def count(self) -> int:
        return len(self._edges)

    def create(self, edges: list[dict[str, Any]]) -> int:
        known = {edge_key(e) for e in self._edges} - {None}
        added = 0
        for edge in edges:
            key = edge_key(edge)
            if key is not None and key in known:
                continue
            self._edges.append(edge)
            if key is not None:
                known.add(key)
            added += 1
        return added


@dataclass
class MemoryMetaRepo(MetaRepo):
    _values: dict[str, str] = field(default_factory=dict)

    def save_meta(self, values: dict[str, str]) -> None:
        self._values.update(values)

    def get_meta(self) -> dict[str, str]:
        return dict(self._values)
