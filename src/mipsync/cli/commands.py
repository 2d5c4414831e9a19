"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mipsync.config import Settings, load_config
from mipsync.core.hierarchy import RegexFatherRule
from mipsync.core.models import GitFile, Language
from mipsync.core.parse.proposal import ProposalParser
from mipsync.core.pipeline import SyncPipeline
from mipsync.core.utils.hashing import git_blob_hash
from mipsync.crud.database import init_db, make_engine, reset_db
from mipsync.crud.sql_repo import SQLDiscussionRepo, SQLMetaRepo, SQLProposalRepo
from mipsync.github.client import GitHubDiscussionAPI
from mipsync.logging import configure_logging
from mipsync.source.git_source import GitSource


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _parser(settings: Settings) -> ProposalParser:
    try:
        father_rule = RegexFatherRule(settings.subproposal_pattern)
    except ValueError as e:     # re.error is a ValueError
        _fail("Invalid subproposal_pattern", e)
    return ProposalParser(settings.parser_config, father_rule)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def sync_cmd(
    repo: Annotated[Optional[str], typer.Option("--repo-path", help="Local working tree of the proposals repo")] = None,
    branch: Annotated[Optional[str], typer.Option("--branch", help="Branch to pull")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log every parsed file")] = False,
    ):
    """Pull the proposals repo, reconcile and parse changed files, link subproposals, sync pull requests."""
    settings = _settings(overrides={"repo_path": repo, "branch": branch})
    configure_logging(settings, verbose=verbose)
    parser = _parser(settings)
    engine = make_engine(settings.db_url)
    init_db(engine)

    api = GitHubDiscussionAPI(
        settings.github_owner, settings.github_repo,
        token=settings.github_token, url=settings.github_url,
        page_size=settings.page_size, timeout=settings.http_timeout,
    )
    try:
        with Session(engine) as session:
            source = GitSource(
                Path(settings.repo_path), SQLMetaRepo(session),
                clone_url=settings.clone_url, file_pattern=settings.file_pattern,
            )
            pipeline = SyncPipeline(
                source, SQLProposalRepo(session), SQLDiscussionRepo(session), api,
                parser=parser, remote=settings.remote, branch=settings.branch,
            )
            ok = pipeline.run_sync()
    finally:
        api.close()

    if not ok:
        _fail(f"Sync aborted: could not refresh {settings.repo_path} from {settings.remote}/{settings.branch}")
    typer.echo("Sync complete")


def parse_cmd(
    path: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Proposal markdown file")],
    language: Annotated[Language, typer.Option("--language", help="Document language")] = Language.english,
    ):
    """Parse one proposal file and print the result as JSON (raw text omitted)."""
    settings = _settings()
    text = path.read_text(encoding="utf-8")
    item = GitFile(filename=path.as_posix(), hash=git_blob_hash(text), language=language)
    proposal = _parser(settings).parse(text, item)
    typer.echo(proposal.model_dump_json(indent=2, exclude={"file"}))


def status_cmd():
    """Show stored proposal and pull request counts and the last synced commit."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        proposals = SQLProposalRepo(session).get_all()
        discussions = SQLDiscussionRepo(session).count()
        meta = SQLMetaRepo(session).get_meta()

    typer.echo(f"Proposals: {len(proposals)}")
    typer.echo(f"Subproposals: {sum(1 for p in proposals.values() if p.proposal)}")
    typer.echo(f"Pull requests: {discussions}")
    if meta:
        typer.echo(json.dumps(meta, indent=2, sort_keys=True))
    else:
        typer.echo("Never synced.")
