"""Top-up synchronization of discussion records from the paginated remote feed"""

from mipsync.crud.repo import DiscussionRepo
from mipsync.github.base import DiscussionAPI
from mipsync.logging import get_logger

logger = get_logger("discussions")


class DiscussionSync:
    """Bring the local discussion dataset up to the remote total.

    An empty local dataset is walked page by page from the start; otherwise
    only the missing most recent records are requested, in one call. Pages are
    stored as they arrive, so a failure part way keeps what was already stored.
    """

    def __init__(self, api: DiscussionAPI, repo: DiscussionRepo):
        self.api = api
        self.repo = repo

    def sync(self, local_count: int) -> int:
        """Run one sync against local_count stored records. Returns the number of batches stored."""
        remote_total = self.api.count()
        logger.info("Pull requests: %d local, %d remote", local_count, remote_total)

        if local_count == 0:
            return self.pull_all() if remote_total > 0 else 0
        if local_count < remote_total:
            return self.pull_last(remote_total - local_count)
        return 0

    def pull_all(self) -> int:
        """Walk every page from the beginning, storing each one on receipt."""
        stored = 0
        batch = self.api.fetch_page()
        while True:
            if batch.edges:
                self.repo.create(batch.edges)
                stored += 1
            if not batch.has_next_page or not batch.end_cursor:
                return stored
            batch = self.api.fetch_page(batch.end_cursor)

    def pull_last(self, missing: int) -> int:
        """Fetch and store the `missing` most recent records."""
        batch = self.api.fetch_last(missing)
        if not batch.edges:
            return 0
        self.repo.create(batch.edges)
        return 1
