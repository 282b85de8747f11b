"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdpost.core.models import ContentItem
from mdpost.crud.records import commit_item


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="make_item")
def make_item_fixture():
    """Build a ContentItem; keyword overrides replace fields."""
    def _make(**overrides) -> ContentItem:
        fields = dict(
            title="Be Aware of Stale Closures when Using React Hooks",
            description="Outdated variables captured by hook callbacks.",
            published_at="2019-10-15T12:10Z",
            thumbnail_path="./images/cover-5.png",
            slug="react-hooks-stale-closures",
            tags=["react", "closure", "hook"],
            recommended=["react-useref-guide"],
            type="post",
            body="\n# Stale closures\n\nBody.\n",
        )
        fields.update(overrides)
        return ContentItem(**fields)
    return _make


@pytest.fixture(name="record")
def record_fixture(session, make_item):
    """A committed record for the default item at posts/stale.md."""
    rec, _ = commit_item(session, make_item(), "posts/stale.md", max_versions=0)
    return rec
