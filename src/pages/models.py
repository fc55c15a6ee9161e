"""Pure data models for page rendering.

All Pydantic models and enums live here. No I/O, no rendering.
Services import from this module; this module only imports from
stdlib and third-party packages.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Source formats
# ---------------------------------------------------------------------------


class SourceFormat(StrEnum):
    """Formats a content document can be written in."""

    MARKDOWN = "markdown"
    HTML = "html"


SUFFIX_FORMATS: dict[str, SourceFormat] = {
    ".md": SourceFormat.MARKDOWN,
    ".markdown": SourceFormat.MARKDOWN,
    ".html": SourceFormat.HTML,
    ".htm": SourceFormat.HTML,
}


# ---------------------------------------------------------------------------
# Content documents
# ---------------------------------------------------------------------------


class Post(BaseModel):
    """A content document parsed from a Markdown or HTML file."""

    slug: str
    title: str
    description: str = ""
    image: str = ""
    published: date | None = None
    tags: list[str] = Field(default_factory=list)
    draft: bool = False
    body: str = ""
    source_format: SourceFormat = SourceFormat.MARKDOWN
    source_path: Path = Path(".")
    title_in_body: bool = False
    extra: dict[str, str | list[str]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def is_published(self) -> bool:
        return not self.draft

    @property
    def has_body(self) -> bool:
        return bool(self.body.strip())


# ---------------------------------------------------------------------------
# Build manifest
# ---------------------------------------------------------------------------


class BuildRecord(BaseModel):
    """Record of a page written by a build."""

    slug: str
    source_path: str
    output_path: str
    content_hash: str
    built_at: datetime


class BuildState(BaseModel):
    """Tracks which pages the last build wrote and from what content."""

    pages: list[BuildRecord] = Field(default_factory=list)

    def get(self, slug: str) -> BuildRecord | None:
        for record in self.pages:
            if record.slug == slug:
                return record
        return None

    def is_current(self, slug: str, content_hash: str) -> bool:
        """Check if ``slug`` was built from content with this hash."""
        record = self.get(slug)
        return record is not None and record.content_hash == content_hash

    def mark_built(self, record: BuildRecord) -> None:
        """Record that a page was built.

        Replaces any existing record with the same slug.
        """
        self.pages = [p for p in self.pages if p.slug != record.slug]
        self.pages.append(record)

    def forget(self, slug: str) -> BuildRecord | None:
        """Drop the record for ``slug`` and return it, if any."""
        record = self.get(slug)
        if record is not None:
            self.pages = [p for p in self.pages if p.slug != slug]
        return record

    @property
    def slugs(self) -> list[str]:
        return [p.slug for p in self.pages]


class BuildResult(BaseModel):
    """Outcome of a site build."""

    written: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    drafts: list[str] = Field(default_factory=list)
    index_path: Path | None = None
    feed_path: Path | None = None

    @property
    def total_pages(self) -> int:
        return len(self.written) + len(self.skipped)
