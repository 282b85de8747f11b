"""File discovery, front-matter splitting, and ContentItem parsing"""

from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mdpost.core.errors import (
    ContentError, InvalidField, InvalidSlug, InvalidTimestamp,
    MalformedDocument, MissingRequiredField,
)
from mdpost.core.models import ContentItem, ContentType, parse_timestamp
from mdpost.core.utils.slug import is_valid_slug, slugify


DELIMITER = '---'
MD_EXTENSIONS = {'.md', '.mdx'}

# Canonical field name -> accepted front-matter keys, first match wins.
FIELD_KEYS: dict[str, tuple[str, ...]] = {
    'title':            ('title',),
    'description':      ('description',),
    'publishedAt':      ('publishedAt', 'published'),
    'modifiedAt':       ('modifiedAt', 'modified'),
    'thumbnailPath':    ('thumbnailPath', 'thumbnail'),
    'slug':             ('slug',),
    'tags':             ('tags',),
    'recommended':      ('recommended',),
    'type':             ('type',),
    'commentsThreadId': ('commentsThreadId',),
}

REQUIRED_FIELDS = ('title', 'description', 'publishedAt', 'slug', 'type', 'thumbnailPath')
NON_BLANK_FIELDS = {'title', 'slug', 'type', 'thumbnailPath'}


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as text, so bad dates reach parse_timestamp."""


FrontmatterLoader.add_constructor("tag:yaml.org,2002:timestamp", FrontmatterLoader.construct_yaml_str)


def split_frontmatter(raw: str) -> tuple[str, str]:
    """Return (frontmatter_text, body). Raises MalformedDocument if delimiters are missing."""
    lines = raw.lstrip('\ufeff').splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        raise MalformedDocument("document must start with a '---' front-matter delimiter")

    for i in range(1, len(lines)):
        if lines[i].rstrip() == DELIMITER:
            return ''.join(lines[1:i]), ''.join(lines[i + 1:])
    raise MalformedDocument("front-matter block is not closed with '---'")


def _load_mapping(fm_text: str) -> dict[str, Any]:
    """Parse the front-matter block as a YAML mapping."""
    try:
        fm = yaml.load(fm_text, Loader=FrontmatterLoader) if fm_text.strip() else {}
    except yaml.YAMLError as e:
        raise MalformedDocument(f"invalid front-matter: {e}") from e
    if fm is None:
        return {}
    if not isinstance(fm, dict):
        raise MalformedDocument(f"front-matter must be a mapping, got {type(fm).__name__}")
    return fm


def _pick(fm: dict[str, Any], name: str) -> Any:
    for key in FIELD_KEYS[name]:
        if fm.get(key) is not None:
            return fm[key]
    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _text(name: str, value: Any) -> str:
    """Coerce a scalar front-matter value to str; YAML reads `title: 2019` as int."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, date)) and not isinstance(value, bool):
        return str(value)
    raise InvalidField(f"'{name}' must be a string, got {type(value).__name__}", field=name)


def _strings(name: str, value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidField(f"'{name}' must be a list, got {type(value).__name__}", field=name)
    bad = [v for v in value if not isinstance(v, str)]
    if bad:
        raise InvalidField(f"'{name}' entries must be strings, got {bad[0]!r}", field=name)
    return list(value)


def _timestamp(name: str, value: Any):
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise InvalidTimestamp(name, value) from e


def parse(raw: str) -> ContentItem:
    """Parse a front-matter document into a ContentItem.

    Checks run in a fixed order so the same document always fails the same way:
    delimiters, required fields (title, description, publishedAt, slug, type,
    thumbnailPath, body), timestamps, slug charset, then field shapes.
    """
    fm_text, body = split_frontmatter(raw)
    fm = _load_mapping(fm_text)

    values = {name: _pick(fm, name) for name in FIELD_KEYS}
    for name in REQUIRED_FIELDS:
        value = values[name]
        if value is None or (name in NON_BLANK_FIELDS and _is_blank(value)):
            raise MissingRequiredField(name)
    if not body.strip():
        raise MissingRequiredField('body')

    published_at = _timestamp('publishedAt', values['publishedAt'])
    modified_at = None
    if values['modifiedAt'] is not None:
        modified_at = _timestamp('modifiedAt', values['modifiedAt'])

    slug = values['slug']
    if isinstance(slug, int) and not isinstance(slug, bool):
        slug = str(slug)
    if not isinstance(slug, str) or not is_valid_slug(slug):
        raise InvalidSlug(slug, suggestion=slugify(str(slug)) or None)

    try:
        content_type = ContentType(values['type'])
    except (ValueError, TypeError):
        allowed = ', '.join(t.value for t in ContentType)
        raise InvalidField(f"'type' must be one of: {allowed}; got {values['type']!r}", field='type') from None

    thread_id = values['commentsThreadId']
    try:
        return ContentItem(
            title=_text('title', values['title']),
            description=_text('description', values['description']),
            published_at=published_at,
            modified_at=modified_at,
            thumbnail_path=_text('thumbnailPath', values['thumbnailPath']),
            slug=slug,
            tags=frozenset(_strings('tags', values['tags'])),
            recommended=tuple(_strings('recommended', values['recommended'])),
            type=content_type,
            comments_thread_id=_text('commentsThreadId', thread_id) if thread_id is not None else None,
            body=body,
        )
    except ValidationError as e:
        first = e.errors()[0]
        name = str(first["loc"][0]) if first["loc"] else None
        raise InvalidField(f"'{name}': {first['msg']}", field=name) from None


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix in MD_EXTENSIONS)


def parse_file(path: Path) -> ContentItem:
    """Read a UTF-8 document and parse it; errors carry the source path."""
    try:
        raw = path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise MalformedDocument(f"not valid UTF-8: {e}", path=path) from e
    try:
        return parse(raw)
    except ContentError as e:
        e.with_path(path)
        raise
