"""Data models for source files, parsed proposals and discussion batches"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Language(str, Enum):
    """Languages a proposal document can be written in"""
    english = "en"
    spanish = "es"


class GitFile(BaseModel):
    """A tracked file observed in the source tree; rebuilt on every refresh, never persisted."""
    filename: str                   # path relative to the repository root; unique key
    hash: str                       # git blob sha of the file content
    language: Language = Language.english


class PreambleFields(BaseModel):
    """Sparse key/value data from a document's leading metadata block; every field optional."""
    mip:            Optional[int] = None
    preamble_title: Optional[str] = None
    author:         Optional[list[str]] = None
    contributors:   Optional[list[str]] = None
    types:          Optional[str] = None
    status:         Optional[str] = None
    date_proposed:  Optional[str] = None
    date_ratified:  Optional[str] = None
    dependencies:   Optional[list[str]] = None
    replaces:       Optional[str] = None
    tags:           Optional[list[str]] = None
    subproposal:    Optional[str] = None


class ComponentSection(BaseModel):
    """One labelled entry of a proposal's Component Summary."""
    label: str                      # e.g. "MIP0c1"
    title: str = ""
    text: str = ""


class Proposal(BaseModel):
    """The persisted unit: one parsed proposal document."""
    id: Optional[str] = None        # assigned by the store
    filename: str
    hash: str
    language: Language = Language.english
    file: str = ""                  # raw markdown

    mip: Optional[int] = None
    mip_name: Optional[str] = None
    title: Optional[str] = None
    preamble_title: Optional[str] = None
    author: list[str] = Field(default_factory=list)
    contributors: list[str] = Field(default_factory=list)
    types: Optional[str] = None
    status: Optional[str] = None
    date_proposed: Optional[str] = None
    date_ratified: Optional[str] = None
    dependencies: list[str] = Field(default_factory=list)
    replaces: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    subproposal: Optional[str] = None
    sentence_summary: Optional[str] = None
    paragraph_summary: Optional[str] = None
    components: list[ComponentSection] = Field(default_factory=list)

    proposal: Optional[str] = None  # father key, e.g. "MIP4" for "MIP4c2-SP1"
    mip_father: bool = False
    father_id: Optional[str] = None
    subproposals_count: int = 0


class DiscussionBatch(BaseModel):
    """One page of discussion records from the remote API."""
    edges: list[dict[str, Any]] = Field(default_factory=list)
    end_cursor: Optional[str] = None
    has_next_page: bool = False
    total_count: Optional[int] = None   # only reported on the first page


class SynchronizeResult(BaseModel):
    """Aggregate outcome of one reconciliation pass; logged and discarded."""
    creates: int = 0
    updates: int = 0
    deletes: int = 0
    errors: int = 0
