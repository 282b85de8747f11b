"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdpost.config import Settings, load_config
from mdpost.core.errors import ContentError
from mdpost.core.export import manifest_entry
from mdpost.core.models import CorpusReport
from mdpost.core.parse import parse_file
from mdpost.core.pipeline import run_check, run_commit, run_export
from mdpost.crud.database import init_db, make_engine, reset_db
from mdpost.crud.records import get_all_records, get_by_slug, get_last_committed, known_slugs, to_item
from mdpost.crud.versioning import diff_current, diff_versions, list_versions
from mdpost.logs import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    setup_logging(settings.log_level)
    return settings


def _echo_report(report: CorpusReport) -> None:
    """Print per-document errors, then warnings, then a summary line."""
    for path, err in report.errors.items():
        typer.echo(f"  error: {path}: {err.message}", err=True)
    for w in report.warnings:
        typer.echo(f"  warning: {w}")
    typer.echo(
        f"Checked {len(report.items) + len(report.errors)} document(s) - "
        f"{len(report.items)} ok, {len(report.errors)} failed, {len(report.warnings)} warning(s)"
    )


def check_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to check")],
    policy: Annotated[Optional[str], typer.Option("--modified-policy", help="warn or reject modifiedAt < publishedAt")] = None,
    no_assets: Annotated[bool, typer.Option("--no-assets", help="Skip thumbnail/image existence checks")] = False,
    strict: Annotated[bool, typer.Option("--strict", help="Exit 1 on warnings too")] = False,
    ):
    """Parse and validate documents without touching the catalog."""
    settings = _settings(overrides={
        "modified_policy": policy, "check_assets": False if no_assets else None,
    })
    if not Path(path).exists():
        _fail(f"Path not found: {path}")

    report = run_check(path, settings)
    _echo_report(report)
    if not report.ok or (strict and report.warnings):
        raise typer.Exit(1)


def show_cmd(
    path: Annotated[str, typer.Argument(help="Document to parse")],
    ):
    """Parse one document and print its record as JSON."""
    _settings()
    try:
        item = parse_file(Path(path))
    except OSError as e:
        _fail(f"Cannot read {path}", e)
    except ContentError as e:
        _fail(str(e))
    typer.echo(json.dumps(manifest_entry(item), indent=2, ensure_ascii=False))


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the catalog schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Catalog initialized at: {settings.db_url}")


def commit_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to commit")],
    versions: Annotated[Optional[int], typer.Option("--max-versions", help="Max stored versions per record")] = None,
    policy: Annotated[Optional[str], typer.Option("--modified-policy", help="warn or reject modifiedAt < publishedAt")] = None,
    ):
    """Check documents and upsert the valid ones into the catalog."""
    settings = _settings(overrides={"max_versions": versions, "modified_policy": policy})
    if not Path(path).exists():
        _fail(f"Path not found: {path}")
    engine = make_engine(settings.db_url)
    init_db(engine)

    with Session(engine) as session:
        catalog_slugs = known_slugs(session)
    report = run_check(path, settings, known_slugs=catalog_slugs)
    _echo_report(report)

    try:
        counts, changes, rejected = run_commit(engine, report, settings.max_versions)
    except Exception as e:
        _fail("Commit failed", e)

    for status, slug in changes:
        typer.echo(f"  {status}: {slug}")
    for err in rejected:
        typer.echo(f"  rejected: {err}", err=True)
    typer.echo(
        f"Commit complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['rejected']} rejected"
    )
    if not report.ok or rejected:
        raise typer.Exit(1)


def export_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    last: Annotated[bool, typer.Option("--last", help="Only records from the most recent commit")] = False,
    ):
    """Write the catalog as a JSON manifest for the site renderer."""
    settings = _settings(overrides={"output_dir": out})
    engine = make_engine(settings.db_url)
    init_db(engine)

    try:
        with Session(engine) as session:
            records = get_last_committed(session) if last else get_all_records(session)
            if not records:
                typer.echo("No records found in catalog.")
                raise typer.Exit(1)  # intentional early exit; re-raised below
            items = [to_item(r) for r in records]
        count, manifest = run_export(items, Path(settings.output_dir), settings.manifest_name)
    except typer.Exit:
        raise  # re-raise intentional no-records exit before generic handler
    except Exception as e:
        _fail("Export failed", e)

    typer.echo(f"Exported {count} record(s) to {manifest}")


def history_cmd(
    slug: Annotated[str, typer.Argument(help="Slug of a committed record")],
    diff: Annotated[Optional[int], typer.Option("--diff", help="Show diff from this version")] = None,
    to: Annotated[Optional[int], typer.Option("--to", help="Diff target version (default: current)")] = None,
    ):
    """List stored versions of a record, or diff a version against another or the current state."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)

    with Session(engine) as session:
        record = get_by_slug(session, slug)
        if record is None:
            _fail(f"No record with slug '{slug}'")

        if diff is None:
            versions = list_versions(session, record.id)
            if not versions:
                typer.echo(f"{slug}: no prior versions")
                return
            for v in versions:
                typer.echo(f"  v{v.version_num}  {v.created_at.isoformat(timespec='seconds')}  {v.hash[:12]}")
            return

        try:
            if to is None:
                lines = diff_current(session, record, diff)
            else:
                lines = diff_versions(session, record.id, diff, to)
        except ValueError as e:
            _fail(str(e))
    if lines:
        typer.echo("".join(lines), nl=False)
    else:
        typer.echo("No differences.")
