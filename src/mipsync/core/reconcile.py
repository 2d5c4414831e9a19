"""Content-hash reconciliation of the source tree against stored proposals"""

from typing import Sequence

from mipsync.core.models import GitFile, Proposal, SynchronizeResult
from mipsync.core.parse.proposal import ProposalParser
from mipsync.crud.repo import ProposalRepo
from mipsync.errors import StoreError
from mipsync.logging import get_logger
from mipsync.source.base import DocumentSource

logger = get_logger("reconcile")

# Failures isolated per file: store errors, unreadable files, undecodable text.
ITEM_ERRORS = (StoreError, OSError, ValueError)


class ReconciliationEngine:
    """Classify each file as create/update/delete by filename and hash, and apply it.

    Files whose hash matches the stored one are never read or parsed.
    """

    def __init__(self, source: DocumentSource, repo: ProposalRepo, parser: ProposalParser):
        self.source = source
        self.repo = repo
        self.parser = parser

    def reconcile(self, files: Sequence[GitFile], stored: dict[str, Proposal]) -> SynchronizeResult:
        """Diff files against stored (filename -> Proposal) and write the changes."""
        result = SynchronizeResult()
        remaining = dict(stored)

        for item in files:
            existing = remaining.pop(item.filename, None)
            if existing is None:
                result.creates += 1
                if not self.create_new(item):
                    result.errors += 1
            elif existing.hash != item.hash:
                result.updates += 1
                if not self.update_if_different_hash(existing, item):
                    result.errors += 1

        result.deletes = len(remaining)
        if not self.delete_from_map(remaining):
            result.errors += 1
        return result

    def parse_item(self, item: GitFile, is_new: bool) -> Proposal:
        """Read and parse one file."""
        if is_new:
            logger.debug("Parse new mip item update => %s", item.filename)
        else:
            logger.debug("Parse mip item update => %s", item.filename)
        return self.parser.parse(self.source.read_file(item.filename), item)

    def create_new(self, item: GitFile) -> bool:
        """Parse and store a file not seen before. Returns False if it failed and was logged."""
        try:
            self.repo.create(self.parse_item(item, is_new=True))
        except ITEM_ERRORS as e:
            logger.error("Failed to create %s: %s", item.filename, e)
            return False
        return True

    def update_if_different_hash(self, stored: Proposal, item: GitFile) -> bool:
        """Re-parse and update stored when the hashes differ.

        Returns False when nothing was written: either the hash is unchanged
        (no parse happens) or the update failed and was logged.
        """
        if stored.hash == item.hash:
            return False
        try:
            self.repo.update(stored.id, self.parse_item(item, is_new=False))
        except ITEM_ERRORS as e:
            logger.error("Failed to update %s: %s", item.filename, e)
            return False
        return True

    def delete_from_map(self, remaining: dict[str, Proposal]) -> bool:
        """Delete every proposal left in remaining with one batched call."""
        ids = [p.id for p in remaining.values()]
        try:
            self.repo.delete_many(ids)
        except StoreError as e:
            logger.error("Failed to delete %d proposal(s): %s", len(ids), e)
            return False
        return True
