"""Root test configuration: shared fixture paths and session-level cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent
FIXTURES_DIR = Path(__file__).parent / "fixtures"

_CLEANUP_FILES = ["mdpost.db", "test.db"]
_CLEANUP_DIRS = ["dist"]


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    """Writable copy of the fixture corpus (two posts with their images)."""
    dest = tmp_path / "content"
    shutil.copytree(FIXTURES_DIR / "content", dest)
    return dest


@pytest.fixture(name="article_path")
def article_path_fixture():
    """The stale-closures article as shipped in the fixture corpus."""
    return FIXTURES_DIR / "content" / "react-hooks-stale-closures" / "index.md"


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and output directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)
