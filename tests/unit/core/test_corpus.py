"""Unit tests for core/corpus.py"""

import pytest

from mdpost.core.corpus import load_corpus
from mdpost.core.errors import DuplicateSlug, InvalidSlug, InvalidTimestamp, MalformedDocument, TimestampOrderError
from mdpost.core.models import WarningKind


@pytest.fixture(name="write")
def write_fixture(tmp_path):
    """Write a document under tmp_path and return its path."""
    def _write(rel: str, text: str):
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p
    return _write


def test_load_corpus_fixture_content(content_dir):
    """The fixture corpus loads cleanly apart from one dangling recommendation."""
    report = load_corpus(content_dir)
    assert report.ok
    assert report.slugs == {"react-hooks-stale-closures", "react-useref-guide"}
    assert [(w.kind, w.reference) for w in report.warnings] == [
        (WarningKind.dangling_recommendation, "react-usestate-hook-guide"),
    ]


def test_load_corpus_known_slugs_resolve_references(content_dir):
    """Slugs known from elsewhere (e.g. the catalog) satisfy recommendations."""
    report = load_corpus(content_dir, known_slugs={"react-usestate-hook-guide"})
    assert report.warnings == []


def test_load_corpus_single_file(article_path):
    """A single file path loads just that document."""
    report = load_corpus(article_path)
    assert list(report.items) == [article_path]
    assert report.root == article_path.parent


def test_load_corpus_skips_bad_documents(tmp_path, write, make_doc):
    """A failing document is recorded and the rest of the corpus still loads."""
    good = write("good.md", make_doc(slug="good", recommended=[]))
    bad = write("bad.md", "no front-matter\n")
    ugly = write("ugly.md", make_doc(slug="Ugly Slug"))

    report = load_corpus(tmp_path, assets=False)
    assert list(report.items) == [good]
    assert isinstance(report.errors[bad], MalformedDocument)
    assert isinstance(report.errors[ugly], InvalidSlug)
    assert not report.ok


def test_load_corpus_duplicate_slug(tmp_path, write, make_doc):
    """The second document claiming a slug is rejected with DuplicateSlug."""
    first = write("a/post.md", make_doc(slug="same", recommended=[]))
    second = write("b/post.md", make_doc(slug="same", recommended=[]))

    report = load_corpus(tmp_path, assets=False)
    assert list(report.items) == [first]
    err = report.errors[second]
    assert isinstance(err, DuplicateSlug)
    assert err.first_path == str(first)


def test_load_corpus_modified_policy(tmp_path, write, make_doc):
    """Out-of-order timestamps warn by default and fail the document under 'reject'."""
    p = write("post.md", make_doc(slug="post", recommended=[], modifiedAt="2001-01-01"))

    warned = load_corpus(tmp_path, assets=False)
    assert [w.kind for w in warned.warnings] == [WarningKind.modified_before_published]

    rejected = load_corpus(tmp_path, modified_policy="reject", assets=False)
    assert isinstance(rejected.errors[p], TimestampOrderError)
    assert rejected.items == {}


def test_load_corpus_reports_missing_assets(tmp_path, write, make_doc):
    """Missing thumbnails are reported unless asset checks are off."""
    write("post.md", make_doc(slug="post", recommended=[]))
    assert [w.kind for w in load_corpus(tmp_path).warnings] == [WarningKind.missing_asset]
    assert load_corpus(tmp_path, assets=False).warnings == []


def test_load_corpus_empty_dir(tmp_path):
    report = load_corpus(tmp_path)
    assert report.ok
    assert report.items == {}


def test_load_corpus_isolates_bad_dates_and_slugs(tmp_path, write, make_doc):
    """Unbuildable YAML dates and near-valid slugs fail their own document only."""
    good = write("a-good.md", make_doc(slug="good", recommended=[]))
    bad_date = write("b-date.md", make_doc(publishedAt=None).replace("---\n", "---\npublishedAt: 2019-02-30\n", 1))
    bad_slug = write("c-slug.md", make_doc(slug="abc\n", recommended=[]))

    report = load_corpus(tmp_path, assets=False)
    assert list(report.items) == [good]
    assert isinstance(report.errors[bad_date], InvalidTimestamp)
    assert isinstance(report.errors[bad_slug], InvalidSlug)
