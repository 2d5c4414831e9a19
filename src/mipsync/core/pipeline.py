"""Sync pipeline: refresh source -> reconcile -> link hierarchy -> sync discussions"""

from mipsync.core.discussions import DiscussionSync
from mipsync.core.hierarchy import HierarchyLinker
from mipsync.core.parse.proposal import ProposalParser
from mipsync.core.reconcile import ReconciliationEngine
from mipsync.crud.repo import DiscussionRepo, ProposalRepo
from mipsync.errors import PaginationError, StoreError, TransportError
from mipsync.github.base import DiscussionAPI
from mipsync.logging import get_logger
from mipsync.source.base import DocumentSource

logger = get_logger("pipeline")


class SyncPipeline:
    """Single entry point for one synchronization run.

    Only the source refresh is fatal; failures in later stages are logged and
    end that stage alone. Runs must not overlap.
    """

    def __init__(
        self,
        source: DocumentSource,
        proposals: ProposalRepo,
        discussions: DiscussionRepo,
        api: DiscussionAPI,
        parser: ProposalParser | None = None,
        remote: str = "origin",
        branch: str = "master",
        ):
        self.source = source
        self.proposals = proposals
        self.discussions = discussions
        self.remote = remote
        self.branch = branch
        self.reconciler = ReconciliationEngine(source, proposals, parser or ProposalParser())
        self.linker = HierarchyLinker(proposals)
        self.discussion_sync = DiscussionSync(api, discussions)

    def run_sync(self) -> bool:
        """Run every stage. Returns False only when the source refresh failed."""
        try:
            self.source.pull(self.remote, self.branch)
            files = self.source.list_files()
        except TransportError as e:
            logger.error("Source refresh failed: %s", e)
            return False
        logger.info("Pulled %s/%s: %d tracked file(s)", self.remote, self.branch, len(files))

        stored = self.proposals.get_all()
        local_count = self.discussions.count()

        result = self.reconciler.reconcile(files, stored)
        logger.info("Synchronize Data ===> %s", result.model_dump_json())
        try:
            self.source.save_meta_vars()
        except (TransportError, StoreError) as e:
            logger.error("Failed to save sync metadata: %s", e)

        try:
            self.linker.link()
        except StoreError as e:
            logger.error("Hierarchy linking failed: %s", e)

        try:
            batches = self.discussion_sync.sync(local_count)
            logger.info("Pull requests synchronized: %d batch(es) stored", batches)
        except (PaginationError, StoreError) as e:
            logger.error("Pull request sync stopped: %s", e)

        return True
