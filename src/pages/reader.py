"""Discovers and parses content documents from the content directory."""

from __future__ import annotations

import contextlib
import html
import logging
import re
from datetime import date
from pathlib import Path

from folio.errors import ContentNotFoundError, DuplicateSlugError, UnsupportedFormatError
from folio.pages.frontmatter import FrontMatter, as_bool, as_list, split_frontmatter
from folio.pages.models import SUFFIX_FORMATS, Post, SourceFormat

logger = logging.getLogger(__name__)

# Front-matter keys mapped onto Post fields; the rest land in Post.extra.
_KNOWN_KEYS = {"title", "description", "image", "date", "tags", "draft", "slug"}

_BODY_RE = re.compile(r"<body[^>]*>(.*?)</body\s*>", re.IGNORECASE | re.DOTALL)
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title\s*>", re.IGNORECASE | re.DOTALL)
_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


def slug_for(path: Path, root: Path | None = None) -> str:
    """Derive a post slug from its file path.

    The slug is the path relative to ``root`` without its suffix, using
    forward slashes, so ``content/notes/cors.md`` becomes ``notes/cors``.
    """
    rel = path
    if root is not None:
        with contextlib.suppress(ValueError):
            rel = path.relative_to(root)
    return rel.with_suffix("").as_posix()


def humanize_slug(slug: str) -> str:
    words = slug.rsplit("/", 1)[-1].replace("-", " ").replace("_", " ").strip()
    return words[:1].upper() + words[1:] if words else slug


def _strip_tags(markup: str) -> str:
    return html.unescape(_TAG_RE.sub("", markup)).strip()


def _split_markdown_title(body: str) -> tuple[str | None, str]:
    """Pull a leading ``# Title`` line off a Markdown body."""
    lines = body.strip("\n").splitlines()
    if lines and lines[0].startswith("# "):
        return lines[0][2:].strip().rstrip("#").strip(), "\n".join(lines[1:]).strip("\n")
    return None, body.strip("\n")


class ContentReader:
    """Discovers and reads content documents from a directory tree."""

    def read_all(self, content_dir: Path) -> list[Post]:
        """Read every supported document under ``content_dir``.

        Hidden files and directories are skipped. Posts are ordered
        newest first; undated posts follow, ordered by slug.

        Raises:
            ContentNotFoundError: If ``content_dir`` does not exist.
            DuplicateSlugError: If two files map to the same slug.
        """
        if not content_dir.is_dir():
            raise ContentNotFoundError(content_dir)

        posts: list[Post] = []
        seen: dict[str, Path] = {}
        for path in self.discover(content_dir):
            post = self.read_file(path, root=content_dir)
            if post.slug in seen:
                raise DuplicateSlugError(post.slug, [seen[post.slug], path])
            seen[post.slug] = path
            posts.append(post)

        logger.debug("Read %d documents from %s", len(posts), content_dir)
        return sort_posts(posts)

    def discover(self, content_dir: Path) -> list[Path]:
        """List supported content files under ``content_dir``."""
        found: list[Path] = []
        for path in sorted(content_dir.rglob("*")):
            rel_parts = path.relative_to(content_dir).parts
            if any(part.startswith((".", "_")) for part in rel_parts):
                continue
            if path.is_file() and path.suffix.lower() in SUFFIX_FORMATS:
                found.append(path)
        return found

    def read_file(self, path: Path, root: Path | None = None) -> Post:
        """Parse a single content file into a Post.

        Args:
            path: The Markdown or HTML file.
            root: Content root used to derive the slug. Defaults to the
                file's own directory.

        Raises:
            ContentNotFoundError: If the file does not exist.
            UnsupportedFormatError: If the suffix is not Markdown or HTML.
        """
        if not path.is_file():
            raise ContentNotFoundError(path)

        source_format = SUFFIX_FORMATS.get(path.suffix.lower())
        if source_format is None:
            raise UnsupportedFormatError(path)

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ContentNotFoundError(path) from exc

        return self.parse(text, path, source_format, root=root or path.parent)

    def parse(
        self,
        text: str,
        path: Path,
        source_format: SourceFormat,
        root: Path | None = None,
    ) -> Post:
        """Build a Post from raw document text."""
        fm, body = split_frontmatter(text)
        slug = _scalar(fm, "slug") or slug_for(path, root)

        if source_format is SourceFormat.MARKDOWN:
            title, body, title_in_body = self._markdown_title(fm, body)
        else:
            title, body, title_in_body = self._html_title(fm, body)

        return Post(
            slug=slug,
            title=title or humanize_slug(slug),
            description=_scalar(fm, "description"),
            image=_scalar(fm, "image"),
            published=_parse_date(fm, path),
            tags=as_list(fm.get("tags")),
            draft=as_bool(fm.get("draft")),
            body=body,
            source_format=source_format,
            source_path=path,
            title_in_body=title_in_body,
            extra={k: v for k, v in fm.items() if k not in _KNOWN_KEYS},
        )

    @staticmethod
    def _markdown_title(fm: FrontMatter, body: str) -> tuple[str, str, bool]:
        fm_title = _scalar(fm, "title")
        heading, rest = _split_markdown_title(body)
        if heading is None:
            return fm_title, body.strip("\n"), False
        if not fm_title or fm_title == heading:
            return heading, rest, False
        # Front-matter title wins; the differing heading stays visible.
        return fm_title, body.strip("\n"), True

    @staticmethod
    def _html_title(fm: FrontMatter, body: str) -> tuple[str, str, bool]:
        title_tag = _TITLE_RE.search(body)
        body_match = _BODY_RE.search(body)
        if body_match is not None:
            body = body_match.group(1)
        body = body.strip("\n")

        h1 = _H1_RE.search(body)
        title = _scalar(fm, "title")
        if not title and title_tag is not None:
            title = _strip_tags(title_tag.group(1))
        if not title and h1 is not None:
            title = _strip_tags(h1.group(1))
        return title, body, h1 is not None


def sort_posts(posts: list[Post]) -> list[Post]:
    """Order posts newest first, with undated posts last by slug."""
    dated = sorted(
        (p for p in posts if p.published is not None),
        key=lambda p: (p.published, p.slug),
        reverse=True,
    )
    undated = sorted((p for p in posts if p.published is None), key=lambda p: p.slug)
    return dated + undated


def _scalar(fm: FrontMatter, key: str) -> str:
    value = fm.get(key, "")
    if isinstance(value, list):
        return ", ".join(value)
    return value


def _parse_date(fm: FrontMatter, path: Path) -> date | None:
    raw = _scalar(fm, "date")
    if not raw:
        return None
    try:
        # Accept full timestamps by keeping only the date part.
        return date.fromisoformat(raw[:10])
    except ValueError:
        logger.warning("Ignoring invalid date %r in %s", raw, path)
        return None
