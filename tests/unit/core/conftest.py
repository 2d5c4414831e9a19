"""Shared fixtures for core unit tests"""

from dataclasses import dataclass, field

import pytest

from mipsync.core.models import DiscussionBatch, GitFile, Language
from mipsync.core.parse.proposal import ProposalParser
from mipsync.core.utils.hashing import git_blob_hash
from mipsync.crud.memory_repo import MemoryDiscussionRepo, MemoryProposalRepo
from mipsync.errors import PaginationError, StoreError, TransportError
from mipsync.github.base import DiscussionAPI
from mipsync.source.base import DocumentSource


MIP_MD = """\
# MIP0: The Maker Improvement Proposal Framework

## Preamble

```
MIP#: 0
Title: The Maker Improvement Proposal Framework
Author(s): Charles St.Louis (@CPSTL), Rune Christensen (@Rune23)
Contributors: @LongForWisdom
Type: Process
Status: Accepted
Date Proposed: 2020-04-06
Date Ratified: 2020-05-02
Dependencies: n/a
Replaces: n/a
```

## References

- The proposed [MIP Template](MIP0/mip0-template.md)

## Sentence Summary

MIP0 defines the framework for Maker Improvement Proposals.

## Paragraph Summary

MIP0 is the founding proposal. It defines the process.

## Component Summary

**MIP0c1: Core Principles**
Defines the core principles of the MIP framework.

**MIP0c2: MIP Lifecycle**
Covers the lifecycle of a MIP.

## Motivation

The Maker Protocol needs a process.

## Specification

### MIP0c1: Core Principles

- MIPs are the primary mechanism for proposing changes.
"""

FATHER_MD = """\
# MIP4: The Maker Improvement Proposal Amendment Process

## Preamble

```
MIP#: 4
Title: Amendments
Status: Accepted
```
"""

SUBPROPOSAL_MD = """\
# MIP4c2-SP1: Amend MIP0

## Preamble

```
MIP4c2-SP#: 1
Author(s): Alice and Bob
Status: RFC
Date Proposed: 2020-06-01
```

## Sentence Summary

Amends MIP0.
"""


def make_file(filename: str, text: str, language: Language = Language.english) -> GitFile:
    return GitFile(filename=filename, hash=git_blob_hash(text), language=language)


class FakeSource(DocumentSource):
    """In-memory DocumentSource recording every call."""

    def __init__(self, contents: dict[str, str] = None, fail_pull: bool = False):
        self.contents = dict(contents or {})
        self.fail_pull = fail_pull
        self.unreadable: set[str] = set()
        self.calls: list[tuple] = []

    def pull(self, remote, branch):
        self.calls.append(("pull", remote, branch))
        if self.fail_pull:
            raise TransportError("forcing error")

    def list_files(self):
        self.calls.append(("list_files",))
        return [make_file(name, text) for name, text in self.contents.items()]

    def read_file(self, filename):
        self.calls.append(("read_file", filename))
        if filename in self.unreadable or filename not in self.contents:
            raise FileNotFoundError(filename)
        return self.contents[filename]

    def save_meta_vars(self):
        self.calls.append(("save_meta_vars",))


class FakeDiscussionAPI(DiscussionAPI):
    """Serves `total` pull request edges in pages of page_size; cursors are offsets."""

    def __init__(self, total: int = 0, page_size: int = 2, fail_on_page: int | None = None):
        self.edges = [{"node": {"id": f"PR_{i}", "number": i}} for i in range(total)]
        self.page_size = page_size
        self.fail_on_page = fail_on_page
        self.calls: list[tuple] = []

    def count(self):
        self.calls.append(("count",))
        return len(self.edges)

    def fetch_page(self, cursor=None):
        self.calls.append(("fetch_page", cursor))
        start = int(cursor) if cursor else 0
        if self.fail_on_page is not None and start // self.page_size == self.fail_on_page:
            raise PaginationError("forcing error")
        end = start + self.page_size
        return DiscussionBatch(
            edges=self.edges[start:end],
            end_cursor=str(end),
            has_next_page=end < len(self.edges),
            total_count=len(self.edges) if cursor is None else None,
        )

    def fetch_last(self, n):
        self.calls.append(("fetch_last", n))
        return DiscussionBatch(edges=self.edges[-n:] if n else [], total_count=len(self.edges))


@dataclass
class RecordingProposalRepo(MemoryProposalRepo):
    calls: list = field(default_factory=list)
    fail_updates: bool = False

    def get_all(self):
        self.calls.append(("get_all",))
        return super().get_all()

    def create(self, proposal):
        self.calls.append(("create", proposal.filename))
        return super().create(proposal)

    def update(self, proposal_id, proposal):
        self.calls.append(("update", proposal_id))
        if self.fail_updates:
            raise StoreError("Forcing error")
        return super().update(proposal_id, proposal)

    def delete_many(self, ids):
        ids = list(ids)
        self.calls.append(("delete_many", ids))
        return super().delete_many(ids)

    def group_by_relation(self):
        self.calls.append(("group_by_relation",))
        return super().group_by_relation()

    def set_father_references(self, ids):
        self.calls.append(("set_father_references", list(ids)))
        return super().set_father_references(ids)

    def unset_fathers(self, ids):
        self.calls.append(("unset_fathers", list(ids)))
        return super().unset_fathers(ids)

    def clear_father_ids(self, ids):
        self.calls.append(("clear_father_ids", list(ids)))
        return super().clear_father_ids(ids)

    def update_subproposal_count(self, proposal_id, count):
        self.calls.append(("update_subproposal_count", proposal_id, count))
        return super().update_subproposal_count(proposal_id, count)


@dataclass
class RecordingDiscussionRepo(MemoryDiscussionRepo):
    batches: list = field(default_factory=list)

    def create(self, edges):
        self.batches.append(list(edges))
        return super().create(edges)


class CountingParser(ProposalParser):
    def __init__(self):
        super().__init__()
        self.parsed: list[str] = []

    def parse(self, raw_text, item):
        self.parsed.append(item.filename)
        return super().parse(raw_text, item)


@pytest.fixture(name="mip_md")
def mip_md_fixture():
    return MIP_MD


@pytest.fixture(name="father_md")
def father_md_fixture():
    return FATHER_MD


@pytest.fixture(name="subproposal_md")
def subproposal_md_fixture():
    return SUBPROPOSAL_MD


@pytest.fixture(name="source")
def source_fixture():
    return FakeSource({
        "MIP0/mip0.md": MIP_MD,
        "MIP4/mip4.md": FATHER_MD,
        "MIP4/MIP4c2-Subproposals/MIP4c2-SP1.md": SUBPROPOSAL_MD,
    })


@pytest.fixture(name="proposals")
def proposals_fixture():
    return RecordingProposalRepo()


@pytest.fixture(name="discussions")
def discussions_fixture():
    return RecordingDiscussionRepo()


@pytest.fixture(name="parser")
def parser_fixture():
    return CountingParser()


@pytest.fixture(name="make_file")
def make_file_fixture():
    return make_file


@pytest.fixture(name="make_source")
def make_source_fixture():
    return FakeSource


@pytest.fixture(name="make_api")
def make_api_fixture():
    return FakeDiscussionAPI
