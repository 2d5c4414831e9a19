"""Git-compatible content hashing for files parsed outside a git listing"""

import hashlib


def git_blob_hash(content: str) -> str:
    """Return the 40-char sha1 git assigns to a blob with this UTF-8 content."""
    data = content.encode("utf-8")
    return hashlib.sha1(b"blob %d\0" % len(data) + data).hexdigest()
