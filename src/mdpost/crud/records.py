"""Content record persistence: upsert with immutability checks, lookups, item conversion"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import func
from sqlmodel import Session, select

from mdpost.core.errors import ImmutableFieldError
from mdpost.core.export import emit_document
from mdpost.core.models import ContentItem
from mdpost.core.utils.hashing import sha256
from mdpost.crud.models import ContentRecord, utc_now
from mdpost.crud.versioning import save_version


logger = logging.getLogger(__name__)


def _utc(dt: datetime | None) -> datetime | None:
    """Aware datetime -> naive UTC, the form stored in DateTime(timezone=False) columns."""
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def get_by_path(session: Session, path: str) -> ContentRecord | None:
    """Return the record committed from the given source path, or None."""
    return session.exec(select(ContentRecord).where(ContentRecord.path == path)).one_or_none()


def get_by_slug(session: Session, slug: str) -> ContentRecord | None:
    """Return the record with the given slug, or None."""
    return session.exec(select(ContentRecord).where(ContentRecord.slug == slug)).one_or_none()


def get_all_records(session: Session) -> list[ContentRecord]:
    """Return all records ordered by slug."""
    return list(session.exec(select(ContentRecord).order_by(ContentRecord.slug)).all())


def get_last_committed(session: Session) -> list[ContentRecord]:
    """Return records from the most recent commit batch (MAX committed_at)."""
    max_ts = session.exec(select(func.max(ContentRecord.committed_at))).one()
    if max_ts is None:
        return []
    return list(session.exec(
        select(ContentRecord).where(ContentRecord.committed_at == max_ts).order_by(ContentRecord.slug)
    ).all())


def known_slugs(session: Session) -> set[str]:
    return set(session.exec(select(ContentRecord.slug)).all())


def to_item(record: ContentRecord) -> ContentItem:
    """Rebuild the ContentItem a record was committed from (timestamps come back as UTC)."""
    return ContentItem(
        title=record.title,
        description=record.description,
        published_at=record.published_at,
        modified_at=record.modified_at,
        thumbnail_path=record.thumbnail_path,
        slug=record.slug,
        tags=frozenset(record.tags or []),
        recommended=tuple(record.recommended or []),
        type=record.type,
        comments_thread_id=record.comments_thread_id,
        body=record.body,
    )


def _editable_fields(item: ContentItem, path: str, document: str) -> dict:
    """Column values an edit may change; slug and published_at are set once on create."""
    return {
        "path": path,
        "title": item.title,
        "description": item.description,
        "modified_at": _utc(item.modified_at),
        "thumbnail_path": item.thumbnail_path,
        "tags": sorted(item.tags),
        "recommended": list(item.recommended),
        "type": item.type.value,
        "comments_thread_id": item.comments_thread_id,
        "body": item.body,
        "document": document,
        "hash": sha256(document),
    }


def commit_item(
    session: Session,
    item: ContentItem,
    path: str | Path,
    max_versions: int = 10,
    committed_at: datetime | None = None,
    ) -> tuple[ContentRecord, str]:
    """Upsert a parsed item.

    Returns (record, status) where status is 'created', 'updated', or 'unchanged'.
    A record is matched by source path, else by slug (a moved file).
    Raises ImmutableFieldError if the slug at a known path, or published_at, changed.
    Snapshots the prior state as a version before updating.
    Flushes but does not commit; caller controls the transaction.
    """
    path = str(path)
    document = emit_document(item)

    record = get_by_path(session, path)
    if record is not None and record.slug != item.slug:
        raise ImmutableFieldError("slug", record.slug, item.slug, path=path)
    if record is None:
        record = get_by_slug(session, item.slug)

    if record is None:
        record = ContentRecord(
            slug=item.slug,
            published_at=_utc(item.published_at),
            committed_at=committed_at,
            **_editable_fields(item, path, document),
        )
        session.add(record)
        session.flush()
        logger.debug("Created %s from %s", item.slug, path)
        return record, 'created'

    if record.published_at != _utc(item.published_at):
        raise ImmutableFieldError("publishedAt", record.published_at, _utc(item.published_at), path=path)

    if record.hash == sha256(document) and record.path == path:
        return record, 'unchanged'

    save_version(session, record, max_versions)
    for name, value in _editable_fields(item, path, document).items():
        setattr(record, name, value)
    record.updated_at = utc_now()
    record.committed_at = committed_at
    session.add(record)
    session.flush()
    logger.debug("Updated %s from %s", item.slug, path)
    return record, 'updated'
