from __future__ import annotations
from datetime import datetime
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from mipsync.core.models import ComponentSection, Proposal
from mipsync.crud.repo import DiscussionRepo, MetaRepo, ProposalRepo, edge_key
from mipsync.crud.sql_models import DiscussionRow, MetaRow, ProposalRow
from mipsync.errors import StoreError


PARSED_FIELDS = (
    "filename", "hash", "language", "file", "mip", "mip_name", "title", "preamble_title",
    "author", "contributors", "types", "status", "date_proposed", "date_ratified",
    "dependencies", "replaces", "tags", "subproposal", "sentence_summary",
    "paragraph_summary", "proposal", "mip_father", "subproposals_count",
)


def _row_to_proposal(r: ProposalRow) -> Proposal:
    return Proposal(
        id=str(r.id),
        components=[ComponentSection(**c) for c in (r.components or [])],
        father_id=str(r.father_id) if r.father_id else None,
        **{name: getattr(r, name) for name in PARSED_FIELDS},
    )


def _proposal_to_row(p: Proposal, existing: ProposalRow | None) -> ProposalRow:
    row = existing or ProposalRow(filename=p.filename, hash=p.hash)
    for name in PARSED_FIELDS:
        setattr(row, name, getattr(p, name))
    row.author = list(p.author)
    row.contributors = list(p.contributors)
    row.dependencies = list(p.dependencies)
    row.tags = list(p.tags)
    row.components = [c.model_dump() for c in p.components]
    row.father_id = _as_uuid(p.father_id)
    row.updated_at = datetime.now()
    return row


def _as_uuid(value: str | None) -> UUID | None:
    if value is None:
        return None
    try:
        return UUID(str(value))
    except ValueError:
        return None


class SQLProposalRepo(ProposalRepo):
    def __init__(self, session: Session):
        self.session = session

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Failed to {action}: {e}") from e

    def _get(self, proposal_id: str) -> ProposalRow | None:
        key = _as_uuid(proposal_id)
        return self.session.get(ProposalRow, key) if key else None

    def get_all(self) -> dict[str, Proposal]:
        rows = self.session.exec(select(ProposalRow)).all()
        return {r.filename: _row_to_proposal(r) for r in rows}

    def create(self, proposal: Proposal) -> Proposal:
        row = _proposal_to_row(proposal, existing=None)
        self.session.add(row)
        self._commit(f"create {proposal.filename}")
        self.session.refresh(row)
        return _row_to_proposal(row)

    def update(self, proposal_id: str, proposal: Proposal) -> Proposal:
        row = self._get(proposal_id)
        if row is None:
            raise StoreError(f"Proposal {proposal_id} not found")
        row = _proposal_to_row(proposal, existing=row)
        self.session.add(row)
        self._commit(f"update {proposal.filename}")
        self.session.refresh(row)
        return _row_to_proposal(row)

    def delete_many(self, ids: Iterable[str]) -> None:
        rows = self._rows(list(ids))
        if not rows:
            return
        for row in rows:
            self.session.delete(row)
        self._commit(f"delete {len(rows)} proposal(s)")

    def group_by_relation(self) -> list[Proposal]:
        child = aliased(ProposalRow)
        has_children = (
            select(child.id)
            .where(child.proposal == ProposalRow.mip_name)
            .where(child.language == ProposalRow.language)
            .exists()
        )
        rows = self.session.exec(
            select(ProposalRow).where(ProposalRow.mip_name.is_not(None)).where(has_children)
            .order_by(ProposalRow.filename)
        ).all()
        return [_row_to_proposal(r) for r in rows]

    def set_father_references(self, ids: list[str]) -> list[bool]:
        flags = []
        for proposal_id in ids:
            father = self._get(proposal_id)
            if father is None:
                flags.append(False)
                continue
            father.mip_father = True
            self.session.add(father)
            children = self.session.exec(
                select(ProposalRow)
                .where(ProposalRow.proposal == father.mip_name)
                .where(ProposalRow.language == father.language)
                .where(ProposalRow.id != father.id)
            ).all()
            for child in children:
                child.father_id = father.id
                self.session.add(child)
            flags.append(True)
        self._commit("set father references")
        return flags

    def _rows(self, ids: list[str]) -> list[ProposalRow]:
        keys = [k for k in (_as_uuid(i) for i in ids) if k is not None]
        if not keys:
            return []
        return list(self.session.exec(select(ProposalRow).where(ProposalRow.id.in_(keys))).all())

    def unset_fathers(self, ids: list[str]) -> None:
        rows = self._rows(ids)
        for row in rows:
            row.mip_father = False
            self.session.add(row)
        if rows:
            self._commit(f"unset {len(rows)} father(s)")

    def clear_father_ids(self, ids: list[str]) -> None:
        rows = self._rows(ids)
        for row in rows:
            row.father_id = None
            self.session.add(row)
        if rows:
            self._commit(f"clear father_id on {len(rows)} proposal(s)")

    def update_subproposal_count(self, proposal_id: str, count: int) -> None:
        row = self._get(proposal_id)
        if row is None:
            raise StoreError(f"Proposal {proposal_id} not found")
        row.subproposals_count = count
        self.session.add(row)
        self._commit(f"update subproposal count of {row.filename}")


class SQLDiscussionRepo(DiscussionRepo):
    def __init__(self, session: Session):
        self.session = session

    def count(self) -> int:
        return self.session.exec(select(func.count()).select_from(DiscussionRow)).one()

    def create(self, edges: list[dict[str, Any]]) -> int:
        keys = {k for k in (edge_key(e) for e in edges) if k is not None}
        known = set()
        if keys:
            known = set(self.session.exec(
                select(DiscussionRow.remote_id).where(DiscussionRow.remote_id.in_(keys))
            ).all())

        added = 0
        for edge in edges:
            key = edge_key(edge)
            if key is not None and key in known:
                continue
            self.session.add(DiscussionRow(remote_id=key, payload=edge))
            if key is not None:
                known.add(key)
            added += 1
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Failed to store {len(edges)} discussion record(s): {e}") from e
        return added


class SQLMetaRepo(MetaRepo):
    def __init__(self, session: Session):
        self.session = session

    def save_meta(self, values: dict[str, str]) -> None:
        for key, value in values.items():
            row = self.session.get(MetaRow, key) or MetaRow(key=key, value=value)
            row.value = value
            row.updated_at = datetime.now()
            self.session.add(row)
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(f"Failed to save sync metadata: {e}") from e

    def get_meta(self) -> dict[str, str]:
        return {r.key: r.value for r in self.session.exec(select(MetaRow)).all()}
