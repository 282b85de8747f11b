"""Slug generation and validation for content identifiers"""

import re


SLUG_RE = re.compile(r'[a-z0-9-]+')


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    text = re.sub(r'[^a-z0-9-]', '', text)
    return re.sub(r'-+', '-', text).strip('-')


def is_valid_slug(slug: str) -> bool:
    """True if slug is non-empty and only uses lowercase letters, digits, and hyphens."""
    return bool(SLUG_RE.fullmatch(slug))
