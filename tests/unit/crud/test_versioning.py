"""Unit tests for crud/versioning.py"""

import pytest
from sqlmodel import Session

from mdpost.core.errors import VersionNotFound
from mdpost.core.utils.hashing import sha256
from mdpost.crud.models import ContentRecord, ContentVersion
from mdpost.crud.versioning import (
    diff_current, diff_versions, get_version, list_versions, prune_versions, save_version,
)


# --- helpers ---

def _make_version(session: Session, record: ContentRecord, document: str) -> ContentVersion:
    """Mutate record.document + hash and save a version snapshot."""
    record.document = document
    record.hash = sha256(document)
    return save_version(session, record, max_versions=0)


# --- save_version ---

def test_save_version_creates_row(session, record):
    """save_version creates a ContentVersion row holding the current document."""
    v = save_version(session, record)
    stored = session.get(ContentVersion, v.id)
    assert stored is not None
    assert stored.document == record.document
    assert stored.hash == record.hash


def test_save_version_numbers_increase(session, record):
    """version_num starts at 1 and increments on each call."""
    v1 = save_version(session, record, max_versions=0)
    v2 = save_version(session, record, max_versions=0)
    assert (v1.version_num, v2.version_num) == (1, 2)


def test_save_version_prunes_on_overflow(session, record):
    """save_version keeps only max_versions snapshots."""
    for _ in range(5):
        save_version(session, record, max_versions=3)
    assert [v.version_num for v in list_versions(session, record.id)] == [3, 4, 5]


def test_save_version_no_prune_when_disabled(session, record):
    for _ in range(5):
        save_version(session, record, max_versions=0)
    assert len(list_versions(session, record.id)) == 5


# --- prune_versions ---

@pytest.mark.parametrize("n_saves,max_v,expected_remaining,expected_deleted", [
    (5, 3, 3, 2),
    (3, 5, 3, 0),
    (5, 0, 5, 0),
])
def test_prune_versions(session, record, n_saves, max_v, expected_remaining, expected_deleted):
    """prune_versions keeps the N newest versions and deletes the oldest."""
    for _ in range(n_saves):
        save_version(session, record, max_versions=0)
    assert prune_versions(session, record.id, max_v) == expected_deleted
    assert len(list_versions(session, record.id)) == expected_remaining


# --- get_version / diffs ---

def test_get_version_missing(session, record):
    """A missing version raises VersionNotFound, which is also a ValueError."""
    with pytest.raises(VersionNotFound):
        get_version(session, record.id, 99)
    with pytest.raises(ValueError):
        get_version(session, record.id, 99)


def test_diff_versions(session, record):
    """diff_versions returns unified diff lines between two snapshots."""
    _make_version(session, record, "---\ntitle: a\n---\nold line\n")
    _make_version(session, record, "---\ntitle: a\n---\nnew line\n")
    lines = diff_versions(session, record.id, 1, 2)
    assert lines[0].startswith("--- v1")
    assert "-old line\n" in lines
    assert "+new line\n" in lines


def test_diff_versions_identical_is_empty(session, record):
    save_version(session, record, max_versions=0)
    save_version(session, record, max_versions=0)
    assert diff_versions(session, record.id, 1, 2) == []


def test_diff_current(session, record):
    """diff_current compares a snapshot to the record's current document."""
    _make_version(session, record, "---\ntitle: a\n---\nold line\n")
    record.document = "---\ntitle: a\n---\ncurrent line\n"
    lines = diff_current(session, record, 1)
    assert lines[1].startswith("+++ current")
    assert "+current line\n" in lines
