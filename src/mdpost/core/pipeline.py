"""Pipeline step functions: check, commit, and export orchestration"""

import logging
from pathlib import Path
from typing import Iterable

from sqlalchemy.engine import Engine
from sqlmodel import Session

from mdpost.config import Settings
from mdpost.core.corpus import load_corpus
from mdpost.core.errors import CatalogError
from mdpost.core.export import write_manifest
from mdpost.core.models import ContentItem, CorpusReport
from mdpost.crud.models import utc_now
from mdpost.crud.records import commit_item


logger = logging.getLogger(__name__)


def run_check(path: str | Path, settings: Settings, known_slugs: Iterable[str] = ()) -> CorpusReport:
    """Parse and check every document under path with the configured policies."""
    return load_corpus(
        Path(path),
        modified_policy=settings.modified_policy,
        assets=settings.check_assets,
        known_slugs=known_slugs,
    )


def run_commit(
    engine: Engine,
    report: CorpusReport,
    max_versions: int,
    ) -> tuple[dict[str, int], list[tuple[str, str]], list[CatalogError]]:
    """Commit every parsed item in report to the catalog in one transaction.

    Returns (counts, changes, rejected): changes lists (status, slug) for
    created/updated records; rejected holds edits refused by the catalog,
    which are skipped without aborting the rest.
    """
    committed_at = utc_now()
    counts = {"created": 0, "updated": 0, "unchanged": 0, "rejected": 0}
    changes: list[tuple[str, str]] = []
    rejected: list[CatalogError] = []

    with Session(engine) as session:
        for path, item in report.items.items():
            try:
                record, status = commit_item(session, item, path.as_posix(), max_versions, committed_at)
            except CatalogError as e:
                logger.warning("Rejected %s: %s", path, e.message)
                counts["rejected"] += 1
                rejected.append(e)
                continue
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, record.slug))
        session.commit()
    return counts, changes, rejected


def run_export(items: Iterable[ContentItem], output_dir: Path, name: str = "manifest.json") -> tuple[int, Path]:
    """Write the manifest for items. Returns (item_count, manifest_path)."""
    items = list(items)
    out = write_manifest(items, output_dir, name)
    logger.info("Exported %d item(s) to %s", len(items), out)
    return len(items), out
