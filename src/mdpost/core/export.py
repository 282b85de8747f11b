"""Export: re-emit front-matter documents and write the JSON manifest for the site renderer"""

import json
from pathlib import Path
from typing import Any, Iterable

import yaml

from mdpost.core.models import ContentItem


def build_frontmatter(item: ContentItem) -> dict[str, Any]:
    """Front-matter mapping in canonical key order; optional fields omitted when unset."""
    fm: dict[str, Any] = {
        "title": item.title,
        "description": item.description,
        "publishedAt": item.published_at.isoformat(),
    }
    if item.modified_at is not None:
        fm["modifiedAt"] = item.modified_at.isoformat()
    fm["thumbnailPath"] = item.thumbnail_path
    fm["slug"] = item.slug
    fm["tags"] = sorted(item.tags)
    fm["recommended"] = list(item.recommended)
    fm["type"] = item.type.value
    if item.comments_thread_id is not None:
        fm["commentsThreadId"] = item.comments_thread_id
    return fm


def emit_document(item: ContentItem) -> str:
    """Return the item as a front-matter document; parse(emit_document(item)) == item."""
    header = yaml.safe_dump(
        build_frontmatter(item), default_flow_style=None, allow_unicode=True, sort_keys=False, width=1000,
    )
    return f"---\n{header}---\n{item.body}"


def manifest_entry(item: ContentItem) -> dict[str, Any]:
    """JSON-ready record with camelCase keys plus the body's image references."""
    entry = item.model_dump(mode="json", by_alias=True)
    entry["images"] = item.images
    return entry


def build_manifest(items: Iterable[ContentItem]) -> dict[str, Any]:
    """Manifest dict: items newest first, ties broken by slug."""
    ordered = sorted(items, key=lambda i: i.slug)
    ordered.sort(key=lambda i: i.published_at, reverse=True)
    return {
        "count": len(ordered),
        "items": [manifest_entry(i) for i in ordered],
    }


def write_manifest(items: Iterable[ContentItem], output_dir: Path, name: str = "manifest.json") -> Path:
    """Write the manifest JSON under output_dir and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out = output_dir / name
    out.write_text(
        json.dumps(build_manifest(items), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return out
