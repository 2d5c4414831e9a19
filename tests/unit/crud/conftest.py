"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mipsync.core.models import ComponentSection, Language, Proposal
from mipsync.crud import sql_models  # noqa: F401  (table registration)


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture(name="make_proposal")
def make_proposal_fixture():
    """Build a minimal Proposal."""
    def _make(filename: str, mip_name: str = None, proposal: str = None, language=Language.english, **kwargs):
        return Proposal(
            filename=filename, hash=kwargs.pop("hash", "a" * 40), language=language,
            mip_name=mip_name, proposal=proposal, **kwargs,
        )
    return _make


@pytest.fixture(name="full_proposal")
def full_proposal_fixture():
    return Proposal(
        filename="MIP0/mip0.md",
        hash="b" * 40,
        file="# MIP0\n",
        mip=0,
        mip_name="MIP0",
        title="MIP0: The Maker Improvement Proposal Framework",
        preamble_title="The Maker Improvement Proposal Framework",
        author=["Charles St.Louis (@CPSTL)", "Rune Christensen (@Rune23)"],
        contributors=["@LongForWisdom"],
        types="Process",
        status="Accepted",
        date_proposed="2020-04-06",
        date_ratified="2020-05-02",
        dependencies=["n/a"],
        replaces="n/a",
        tags=["governance"],
        sentence_summary="MIP0 defines the framework.",
        paragraph_summary="MIP0 is the founding proposal.",
        components=[ComponentSection(label="MIP0c1", title="Core Principles", text="Defines the principles.")],
    )
