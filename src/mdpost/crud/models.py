"""Database table definitions for committed content records and their version history"""

from datetime import datetime, timezone
from typing import Any, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import Column, DateTime, JSON, String, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Current time as naive UTC, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ContentRecord(SQLModel, table=True):
    """A committed content item; slug and published_at are fixed once created"""
    __tablename__ = "content_records"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(..., sa_column=Column(String(255), nullable=False, unique=True, index=True))
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    description: str = Field(..., sa_column=Column(Text, nullable=False))
    published_at: datetime = Field(..., sa_column=Column(DateTime(timezone=False), nullable=False), description="UTC")
    modified_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True), description="UTC")
    thumbnail_path: str = Field(..., sa_column=Column(Text, nullable=False))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    recommended: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    type: str = Field(..., sa_column=Column(String(32), nullable=False))
    comments_thread_id: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    body: str = Field(..., sa_column=Column(Text, nullable=False))
    document: str = Field(..., sa_column=Column(Text, nullable=False), description="Normalized front-matter document")
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=False), nullable=False))
    committed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))


class ContentVersion(SQLModel, table=True):
    """Immutable snapshot of a ContentRecord at a prior state."""
    __tablename__ = "content_versions"
    __table_args__ = (UniqueConstraint("record_id", "version_num", name="uq_contentver_record_num"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    record_id: UUID = Field(..., foreign_key="content_records.id", index=True, nullable=False)
    version_num: int = Field(..., nullable=False, description="Monotonically increasing per-record version number")
    document: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime(timezone=False), nullable=False))
