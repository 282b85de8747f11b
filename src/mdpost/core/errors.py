"""Exception hierarchy for content parsing and the catalog.

Every exception inherits from ContentError so callers can catch broadly
or narrowly. Each one carries structured context (source path, field name,
details) so the CLI and the corpus report can say which document failed.
"""

from __future__ import annotations

from pathlib import Path


class ContentError(Exception):
    """Base exception for all content errors."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        field: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message
        self.path = str(path) if path is not None else None
        self.field = field
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def with_path(self, path: str | Path) -> ContentError:
        """Attach the source path and return self, for re-raising from file readers."""
        self.path = str(path)
        return self


# --- parse errors: fatal to one document, never to the corpus ---

class ParseError(ContentError):
    """A document could not be turned into a ContentItem."""
    pass


class MalformedDocument(ParseError):
    """Front-matter delimiters are missing/unbalanced or the block is not a mapping."""
    pass


class MissingRequiredField(ParseError):
    """A required front-matter field is absent or blank."""

    def __init__(self, field: str, **kwargs) -> None:
        super().__init__(f"missing required field '{field}'", field=field, **kwargs)


class InvalidTimestamp(ParseError):
    """A timestamp field does not parse as ISO-8601."""

    def __init__(self, field: str, value: object, message: str | None = None, **kwargs) -> None:
        self.value = value
        super().__init__(
            message or f"'{field}' is not an ISO-8601 timestamp: {value!r}",
            field=field,
            **kwargs,
        )


class TimestampOrderError(InvalidTimestamp):
    """modifiedAt is earlier than publishedAt and the policy is to reject."""
    pass


class InvalidSlug(ParseError):
    """Slug contains characters outside [a-z0-9-]."""

    def __init__(self, slug: object, suggestion: str | None = None, **kwargs) -> None:
        self.slug = slug
        self.suggestion = suggestion
        hint = f" (try '{suggestion}')" if suggestion else ""
        super().__init__(
            f"slug {slug!r} must only contain lowercase letters, digits, and hyphens{hint}",
            field="slug",
            **kwargs,
        )


class InvalidField(ParseError):
    """A field has a value of the wrong shape or outside its allowed set."""
    pass


class DuplicateSlug(ParseError):
    """Another document in the corpus already claims this slug."""

    def __init__(self, slug: str, first_path: str | Path, **kwargs) -> None:
        self.slug = slug
        self.first_path = str(first_path)
        super().__init__(
            f"slug '{slug}' is already used by {first_path}",
            field="slug",
            **kwargs,
        )


# --- catalog errors ---

class CatalogError(ContentError):
    """A catalog operation was rejected."""
    pass


class ImmutableFieldError(CatalogError):
    """An edit tried to change a field that is fixed once published."""

    def __init__(self, field: str, old: object, new: object, **kwargs) -> None:
        self.old = old
        self.new = new
        super().__init__(
            f"'{field}' cannot change once published ({old!r} -> {new!r})",
            field=field,
            **kwargs,
        )


class VersionNotFound(CatalogError, ValueError):
    """A requested version number does not exist for a record."""
    pass
