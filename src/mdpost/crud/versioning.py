"""Record version persistence: save, prune, list, and diff operations"""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from mdpost.core.errors import VersionNotFound
from mdpost.core.utils.diff import unified_diff
from mdpost.crud.models import ContentRecord, ContentVersion


def get_version(session: Session, record_id: UUID, version_num: int) -> ContentVersion:
    """Return one stored version. Raises VersionNotFound if it does not exist."""
    v = session.exec(
        select(ContentVersion)
        .where(ContentVersion.record_id == record_id)
        .where(ContentVersion.version_num == version_num)
    ).one_or_none()
    if v is None:
        raise VersionNotFound(f"Version {version_num} not found for record {record_id}")
    return v


def diff_versions(session: Session, record_id: UUID, from_num: int, to_num: int, context: int = 3) -> list[str]:
    """Unified diff lines between two stored versions. Raises VersionNotFound if either is missing."""
    v_from = get_version(session, record_id, from_num)
    v_to = get_version(session, record_id, to_num)
    return unified_diff(v_from.document, v_to.document, f"v{from_num}", f"v{to_num}", context)


def diff_current(session: Session, record: ContentRecord, version_num: int, context: int = 3) -> list[str]:
    """Unified diff lines from a stored version to the record's current document."""
    v = get_version(session, record.id, version_num)
    return unified_diff(v.document, record.document, f"v{version_num}", "current", context)


def list_versions(session: Session, record_id: UUID) -> list[ContentVersion]:
    """Return all versions for a record ordered by version_num ascending."""
    return list(
        session.exec(
            select(ContentVersion)
            .where(ContentVersion.record_id == record_id)
            .order_by(ContentVersion.version_num.asc())
        ).all()
    )


def prune_versions(session: Session, record_id: UUID, max_versions: int) -> int:
    """Delete oldest versions beyond max_versions. Returns count deleted. No-op if max_versions=0."""
    if max_versions == 0:
        return 0

    versions = list_versions(session, record_id)
    excess = len(versions) - max_versions
    if excess <= 0:
        return 0

    for v in versions[:excess]:
        session.delete(v)
    session.flush()
    return excess


def save_version(session: Session, record: ContentRecord, max_versions: int = 10) -> ContentVersion:
    """Snapshot the record's current document as a new immutable version.

    version_num is MAX(version_num)+1 for this record, so numbers keep
    increasing after pruning. Prunes when max_versions > 0.
    """
    result = session.exec(
        select(func.max(ContentVersion.version_num))
        .where(ContentVersion.record_id == record.id)
    ).one()

    version = ContentVersion(
        record_id=record.id,
        version_num=(result or 0) + 1,
        document=record.document,
        hash=record.hash,
    )
    session.add(version)
    session.flush()

    if max_versions > 0:
        prune_versions(session, record.id, max_versions)

    return version
