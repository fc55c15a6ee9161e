"""Base class for source-format specific body rendering."""

from __future__ import annotations

from abc import ABC, abstractmethod

from folio.pages.models import Post, SourceFormat


class PageRenderer(ABC):
    """Converts a post body into an HTML fragment for the page shell."""

    source_format: SourceFormat

    @abstractmethod
    def render_body(self, post: Post) -> str:
        """Render the post body to HTML."""

    def fingerprint(self) -> str:
        """Identify the renderer settings that affect output."""
        return self.source_format.value
