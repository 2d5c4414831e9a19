"""Database table definitions for proposals, discussion records and sync metadata"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, JSON, String, Text
from sqlmodel import Field, SQLModel

from mipsync.core.models import Language


class ProposalRow(SQLModel, table=True):
    """A parsed proposal document; filename is the natural key"""
    __tablename__ = "proposals"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    filename: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    language: Language = Field(default=Language.english, nullable=False)
    file: str = Field(default="", sa_column=Column(Text, nullable=False))

    mip: Optional[int] = Field(default=None, index=True)
    mip_name: Optional[str] = Field(default=None, index=True)
    title: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    preamble_title: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    author: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    contributors: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    types: Optional[str] = None
    status: Optional[str] = None
    date_proposed: Optional[str] = None
    date_ratified: Optional[str] = None
    dependencies: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    replaces: Optional[str] = None
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    subproposal: Optional[str] = None
    sentence_summary: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    paragraph_summary: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    components: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    proposal: Optional[str] = Field(default=None, index=True, description="Father key of a subproposal")
    mip_father: bool = Field(default=False, nullable=False)
    father_id: Optional[UUID] = Field(default=None, description="Weak reference to the father proposal")
    subproposals_count: int = Field(default=0, nullable=False)

    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class DiscussionRow(SQLModel, table=True):
    """One discussion edge (a pull request node) as returned by the remote API"""
    __tablename__ = "discussions"
    id: Optional[int] = Field(default=None, primary_key=True)
    remote_id: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True, unique=True))
    payload: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class MetaRow(SQLModel, table=True):
    """Sync bookkeeping, e.g. the last pulled commit"""
    __tablename__ = "meta"
    key: str = Field(primary_key=True)
    value: str = Field(..., sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
