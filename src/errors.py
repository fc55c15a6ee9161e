"""Exception hierarchy for site rendering and building."""

from __future__ import annotations

from pathlib import Path


class FolioError(Exception):
    """Base class for all errors raised while rendering a site."""


class ContentNotFoundError(FolioError):
    """A content file or directory does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Content not found: {path}")


class UnsupportedFormatError(FolioError):
    """A content file has a suffix no renderer handles."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Unsupported content format: {path.suffix or path.name}")


class DuplicateSlugError(FolioError):
    """Two content files map to the same output slug."""

    def __init__(self, slug: str, paths: list[Path]) -> None:
        self.slug = slug
        self.paths = paths
        joined = ", ".join(str(p) for p in paths)
        super().__init__(f"Duplicate slug {slug!r}: {joined}")


class EmptyPostError(FolioError):
    """A published post has no body text."""

    def __init__(self, slug: str, path: Path | None = None) -> None:
        self.slug = slug
        self.path = path
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Post {slug!r} has an empty body{where}")


class TemplateRenderError(FolioError):
    """The page shell template failed to load or render."""

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Template {template!r} failed: {reason}")


class MarkdownExtensionError(FolioError):
    """A configured Python-Markdown extension could not be loaded."""

    def __init__(self, extensions: list[str], reason: str) -> None:
        self.extensions = extensions
        self.reason = reason
        super().__init__(f"Markdown extensions {extensions!r} failed to load: {reason}")
