"""Father/subproposal linking and subproposal counts"""

import json
import re
from collections import Counter
from pathlib import PurePosixPath
from typing import Callable, Optional

from mipsync.core.models import Proposal
from mipsync.crud.repo import ProposalRepo
from mipsync.logging import get_logger


DEFAULT_SUBPROPOSAL_PATTERN = r"^(?P<father>MIP\d+)c\d+-SP\d+"

FatherRule = Callable[[Proposal], Optional[str]]

logger = get_logger("hierarchy")


class RegexFatherRule:
    """Derive a subproposal's father key from its subproposal name or file stem.

    The pattern must define a `father` group; its match against either
    candidate is the father's `mip_name`.
    """

    def __init__(self, pattern: str = DEFAULT_SUBPROPOSAL_PATTERN):
        self.pattern = re.compile(pattern)
        if 'father' not in self.pattern.groupindex:
            raise ValueError(f"Subproposal pattern needs a 'father' group: {pattern}")

    def __call__(self, proposal: Proposal) -> Optional[str]:
        for candidate in (proposal.subproposal, PurePosixPath(proposal.filename).stem):
            if candidate and (m := self.pattern.match(candidate)):
                return m['father']
        return None


class HierarchyLinker:
    """Mark father proposals, point subproposals at them and refresh subproposal counts."""

    def __init__(self, repo: ProposalRepo):
        self.repo = repo

    def link(self) -> list[Proposal]:
        """Run the linking stage and return the father proposals found."""
        fathers = self.repo.group_by_relation()
        logger.info(
            "Mips with subproposals data ===> %s",
            json.dumps([{"id": f.id, "mip_name": f.mip_name, "language": f.language.value} for f in fathers]),
        )
        if fathers:
            self.repo.set_father_references([f.id for f in fathers])
        self.clear_stale_references(fathers)
        self.update_subproposal_count_field(fathers)
        return fathers

    def clear_stale_references(self, fathers: list[Proposal]) -> int:
        """Unlink fathers left without subproposals and children whose father is gone.

        Returns the number of proposals touched.
        """
        keys = {(f.language, f.mip_name): f.id for f in fathers}
        stored = self.repo.get_all().values()
        lone = [p.id for p in stored if p.mip_father and p.id not in keys.values()]
        orphans = [
            p.id for p in stored
            if p.father_id is not None and keys.get((p.language, p.proposal)) != p.father_id
        ]
        if lone:
            self.repo.unset_fathers(lone)
        if orphans:
            self.repo.clear_father_ids(orphans)
        return len(lone) + len(orphans)

    def update_subproposal_count_field(self, fathers: list[Proposal]) -> int:
        """Recompute subproposals_count for each father and zero it on former fathers.

        Returns how many counts changed.
        """
        stored = self.repo.get_all().values()
        counts = Counter((p.language, p.proposal) for p in stored if p.proposal)
        ids = {f.id for f in fathers}
        changed = 0
        for father in fathers + [p for p in stored if p.subproposals_count and p.id not in ids]:
            count = counts[(father.language, father.mip_name)]
            if father.subproposals_count != count:
                self.repo.update_subproposal_count(father.id, count)
                changed += 1
        return changed
