"""Corpus loading: parse every document under a root and collect per-document outcomes"""

import logging
from pathlib import Path
from typing import Iterable

from mdpost.core.errors import DuplicateSlug, ParseError
from mdpost.core.models import CorpusReport
from mdpost.core.parse import discover_files, parse_file
from mdpost.core.validate import check_assets, check_timestamps, validate_cross_references


logger = logging.getLogger(__name__)


def load_corpus(
    path: Path,
    modified_policy: str = 'warn',
    assets: bool = True,
    known_slugs: Iterable[str] = (),
    ) -> CorpusReport:
    """Parse all documents under path into a CorpusReport.

    A document that fails to parse, or that reuses a slug already claimed by an
    earlier file (sorted path order), is recorded in report.errors and skipped.
    Recommendations resolve against the parsed slugs plus known_slugs.
    """
    path = Path(path)
    report = CorpusReport(root=path if path.is_dir() else path.parent)
    owners: dict[str, Path] = {}

    for p in discover_files(path):
        try:
            item = parse_file(p)
            warnings = check_timestamps(item, modified_policy)
            if item.slug in owners:
                raise DuplicateSlug(item.slug, owners[item.slug], path=p)
        except ParseError as e:
            logger.warning("Skipping %s: %s", p, e.message)
            report.errors[p] = e
            continue

        owners[item.slug] = p
        report.items[p] = item
        report.warnings.extend(warnings)
        if assets:
            report.warnings.extend(check_assets(item, p.parent))

    resolvable = report.slugs | set(known_slugs)
    for item in report.items.values():
        report.warnings.extend(validate_cross_references(item, resolvable))

    logger.info(
        "Loaded %d document(s) from %s: %d error(s), %d warning(s)",
        len(report.items), path, len(report.errors), len(report.warnings),
    )
    return report
