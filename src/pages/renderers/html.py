"""Pass-through renderer for HTML content documents."""

from __future__ import annotations

from folio.pages.models import Post, SourceFormat
from folio.pages.renderers.base import PageRenderer


class HtmlRenderer(PageRenderer):
    """Emits HTML bodies unchanged."""

    source_format = SourceFormat.HTML

    def render_body(self, post: Post) -> str:
        return post.body.strip("\n")
