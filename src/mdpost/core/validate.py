"""Non-fatal checks over parsed items: cross references, timestamp order, assets"""

import logging
from pathlib import Path
from typing import Iterable
from urllib.parse import urlparse

from mdpost.core.errors import TimestampOrderError
from mdpost.core.models import ContentItem, ContentWarning, WarningKind


logger = logging.getLogger(__name__)

MODIFIED_POLICIES = ('warn', 'reject')


def validate_cross_references(item: ContentItem, known_slugs: Iterable[str]) -> list[ContentWarning]:
    """One DanglingRecommendation per recommended slug not in known_slugs."""
    known = set(known_slugs)
    return [
        ContentWarning(
            kind=WarningKind.dangling_recommendation,
            slug=item.slug,
            message=f"recommends unknown slug '{ref}'",
            reference=ref,
        )
        for ref in item.recommended
        if ref not in known
    ]


def check_timestamps(item: ContentItem, policy: str = 'warn') -> list[ContentWarning]:
    """Flag modified_at earlier than published_at.

    policy 'warn' returns a ModifiedBeforePublished warning;
    'reject' raises TimestampOrderError.
    """
    if policy not in MODIFIED_POLICIES:
        raise ValueError(f"Unknown modified policy: {policy!r}")
    if item.modified_at is None or item.modified_at >= item.published_at:
        return []

    message = (
        f"modifiedAt {item.modified_at.isoformat()} is earlier than "
        f"publishedAt {item.published_at.isoformat()}"
    )
    if policy == 'reject':
        raise TimestampOrderError('modifiedAt', item.modified_at, message)
    return [ContentWarning(kind=WarningKind.modified_before_published, slug=item.slug, message=message)]


def _is_local(ref: str) -> bool:
    parsed = urlparse(ref)
    return not parsed.scheme and not parsed.netloc and not ref.startswith('/')


def check_assets(item: ContentItem, base_dir: Path) -> list[ContentWarning]:
    """One MissingAsset per relative thumbnail/body image path not found under base_dir."""
    warnings = []
    for ref in dict.fromkeys([item.thumbnail_path, *item.images]):
        if not _is_local(ref):
            continue
        local = urlparse(ref).path
        if not (base_dir / local).is_file():
            logger.debug("Asset %s not found under %s", ref, base_dir)
            warnings.append(ContentWarning(
                kind=WarningKind.missing_asset,
                slug=item.slug,
                message=f"asset '{ref}' not found next to the document",
                reference=ref,
            ))
    return warnings
