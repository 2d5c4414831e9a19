"""Error taxonomy shared by the sync pipeline and its collaborators"""


class MipSyncError(Exception):
    """Base class for all mipsync errors."""


class TransportError(MipSyncError):
    """Refreshing or listing the source repository failed. Aborts the whole run."""


class StoreError(MipSyncError):
    """A create/update/delete against the store failed. Recovered per item."""


class PaginationError(MipSyncError):
    """Fetching a page from the discussion API failed. Ends the discussion stage only."""
