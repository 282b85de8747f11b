"""Shared fixtures for core unit tests"""

import json

import pytest


DEFAULT_FIELDS = {
    "title": "Be Aware of Stale Closures when Using React Hooks",
    "description": "Outdated variables captured by hook callbacks.",
    "publishedAt": "2019-10-15T12:10Z",
    "thumbnailPath": "./images/cover-5.png",
    "slug": "react-hooks-stale-closures",
    "tags": ["react", "closure", "hook"],
    "recommended": ["react-useref-guide"],
    "type": "post",
}

DEFAULT_BODY = "\n# Stale closures\n\nA closure captures the variables of its render.\n"


def _render(fields: dict, body: str) -> str:
    lines = [f"{k}: {json.dumps(v)}" for k, v in fields.items() if v is not None]
    return "---\n" + "\n".join(lines) + "\n---\n" + body


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    """Build a raw front-matter document; keyword overrides replace fields, None drops one."""
    def _make(body: str = DEFAULT_BODY, **overrides) -> str:
        fields = {**DEFAULT_FIELDS, **overrides}
        return _render(fields, body)
    return _make


@pytest.fixture(name="raw_doc")
def raw_doc_fixture(make_doc):
    return make_doc()
