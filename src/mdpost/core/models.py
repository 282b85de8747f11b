"""Typed content records, warnings, and corpus reports"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from mdpost.core.errors import ParseError
from mdpost.core.utils.tokens import image_sources


class ContentType(str, Enum):
    """Restrict content items to the kinds the site knows how to render"""
    post = "post"
    page = "page"


def parse_timestamp(value) -> datetime:
    """Coerce an ISO-8601 string, date, or datetime to a timezone-aware datetime.

    Date-only values become midnight; values without an offset are taken as UTC.
    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"not an ISO-8601 timestamp: {value!r}")
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class ContentItem(BaseModel):
    """A parsed front-matter document: typed metadata plus raw Markdown body.

    Field aliases are the camelCase front-matter keys; python names are accepted too.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(min_length=1)
    description: str
    published_at: datetime = Field(alias="publishedAt")
    modified_at: Optional[datetime] = Field(default=None, alias="modifiedAt")
    thumbnail_path: str = Field(alias="thumbnailPath")
    slug: str = Field(pattern=r"^[a-z0-9-]+$")
    tags: frozenset[str] = frozenset()
    recommended: tuple[str, ...] = ()
    type: ContentType = ContentType.post
    comments_thread_id: Optional[str] = Field(default=None, alias="commentsThreadId")
    body: str = Field(min_length=1)

    @field_validator("published_at", "modified_at", mode="before")
    @classmethod
    def coerce_timestamp(cls, v):
        return None if v is None else parse_timestamp(v)

    @field_serializer("tags")
    def serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    @property
    def images(self) -> list[str]:
        """Image paths referenced from the body, in document order."""
        return image_sources(self.body)


class WarningKind(str, Enum):
    dangling_recommendation = "DanglingRecommendation"
    modified_before_published = "ModifiedBeforePublished"
    missing_asset = "MissingAsset"


@dataclass(frozen=True)
class ContentWarning:
    """Non-fatal finding about one item; reported, never blocks publication."""
    kind:      WarningKind
    slug:      str
    message:   str
    reference: Optional[str] = None     # the offending slug or asset path, if any

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.slug}: {self.message}"


@dataclass
class CorpusReport:
    """Outcome of loading every document under a content root."""
    root:     Path
    items:    dict[Path, ContentItem] = field(default_factory=dict)
    errors:   dict[Path, ParseError]  = field(default_factory=dict)
    warnings: list[ContentWarning]    = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def slugs(self) -> set[str]:
        return {item.slug for item in self.items.values()}
