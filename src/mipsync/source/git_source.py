"""
Git-backed document source.

Keeps a local working tree of the proposals repository up to date and lists
its tracked markdown files with their blob hashes, as reported by
`git ls-files -s`.
"""

import re
from datetime import datetime
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from mipsync.core.models import GitFile, Language
from mipsync.crud.repo import MetaRepo
from mipsync.errors import TransportError
from mipsync.logging import get_logger
from mipsync.source.base import DocumentSource

logger = get_logger("source")

I18N_RE = re.compile(r'^I18N/(?P<lang>[A-Za-z]{2})/', re.IGNORECASE)
DEFAULT_FILE_PATTERN = r"MIP\d+.*\.md$"


def detect_language(filename: str) -> Language:
    """Return the language of a tracked file from its `I18N/<code>/` prefix; English otherwise."""
    m = I18N_RE.match(filename)
    if m:
        try:
            return Language(m['lang'].lower())
        except ValueError:
            logger.debug("Unknown language prefix in %s, treating as English", filename)
    return Language.english


def parse_ls_files(output: str, pattern: re.Pattern) -> list[GitFile]:
    """Parse `git ls-files -s` output (`<mode> <sha> <stage>\\t<path>`) into GitFiles."""
    files = []
    for line in output.splitlines():
        meta, sep, filename = line.partition("\t")
        parts = meta.split()
        if not sep or len(parts) != 3 or not pattern.search(filename):
            continue
        files.append(GitFile(filename=filename, hash=parts[1], language=detect_language(filename)))
    return files


class GitSource(DocumentSource):
    """
    DocumentSource over a local clone of the proposals repository.

    Args:
        repo_path: Working tree location
        meta: Where save_meta_vars records the last synced commit
        clone_url: Cloned into repo_path on the first pull when the tree is missing
        file_pattern: Regex selecting tracked proposal files
    """

    def __init__(
        self,
        repo_path: Path,
        meta: MetaRepo,
        clone_url: str | None = None,
        file_pattern: str = DEFAULT_FILE_PATTERN,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.meta = meta
        self.clone_url = clone_url
        self.pattern = re.compile(file_pattern)
        self._repo: Repo | None = None

    @property
    def repo(self) -> Repo:
        if self._repo is None:
            try:
                self._repo = Repo(self.repo_path)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise TransportError(f"Not a git repository: {self.repo_path}") from e
        return self._repo

    def pull(self, remote: str, branch: str) -> None:
        try:
            if not self.repo_path.exists() and self.clone_url:
                logger.info("Cloning %s into %s", self.clone_url, self.repo_path)
                self._repo = Repo.clone_from(self.clone_url, self.repo_path, branch=branch)
                return
            self.repo.remote(remote).pull(branch)
        except (GitCommandError, ValueError) as e:
            raise TransportError(f"Failed to pull {remote}/{branch}: {e}") from e

    def list_files(self) -> list[GitFile]:
        try:
            output = self.repo.git.ls_files("-s")
        except GitCommandError as e:
            raise TransportError(f"Failed to list files in {self.repo_path}: {e}") from e
        return parse_ls_files(output, self.pattern)

    def read_file(self, filename: str) -> str:
        return (self.repo_path / filename).read_text(encoding="utf-8")

    def save_meta_vars(self) -> None:
        try:
            commit = self.repo.head.commit
        except (GitCommandError, ValueError) as e:
            raise TransportError(f"No commit to record in {self.repo_path}: {e}") from e
        self.meta.save_meta({
            "last_commit_hash": commit.hexsha,
            "last_commit_date": commit.committed_datetime.isoformat(),
            "last_synced_at": datetime.now().isoformat(),
        })
