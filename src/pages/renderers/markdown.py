"""Markdown renderer backed by Python-Markdown."""

from __future__ import annotations

import logging

import markdown

from folio.config import DEFAULT_MARKDOWN_EXTENSIONS
from folio.errors import MarkdownExtensionError
from folio.pages.models import Post, SourceFormat
from folio.pages.renderers.base import PageRenderer

logger = logging.getLogger(__name__)


class MarkdownRenderer(PageRenderer):
    """Converts Markdown bodies to HTML fragments."""

    source_format = SourceFormat.MARKDOWN

    def __init__(self, extensions: list[str] | None = None) -> None:
        self.extensions = (
            list(extensions) if extensions is not None else list(DEFAULT_MARKDOWN_EXTENSIONS)
        )

    def render_body(self, post: Post) -> str:
        """Render the post body to HTML.

        A fresh converter is used per post so that state kept by
        extensions (footnotes, heading ids) does not leak between posts.
        """
        html = self._converter().convert(post.body)
        logger.debug("Rendered %s (%d chars of markdown)", post.slug, len(post.body))
        return html

    def _converter(self) -> markdown.Markdown:
        try:
            return markdown.Markdown(extensions=self.extensions, output_format="html")
        except (ImportError, AttributeError, TypeError) as exc:
            raise MarkdownExtensionError(self.extensions, str(exc)) from exc

    def fingerprint(self) -> str:
        return "markdown:" + ",".join(self.extensions)
