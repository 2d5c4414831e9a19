from __future__ import annotations
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from mipsync.crud.sql_models import DiscussionRow, MetaRow, ProposalRow  # noqa: F401  (table registration)


def make_engine(db_url: str) -> Engine:
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, echo=False, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def reset_db(engine: Engine) -> None:
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
