"""Renderer factory and registry."""

from __future__ import annotations

from folio.pages.models import SourceFormat
from folio.pages.renderers.base import PageRenderer


def create_renderer(
    source_format: SourceFormat | str,
    *,
    extensions: list[str] | None = None,
) -> PageRenderer:
    """Create a renderer for the given source format.

    Args:
        source_format: The format of the content document.
        extensions: Python-Markdown extensions for the Markdown renderer.

    Returns:
        A PageRenderer instance for the format.

    Raises:
        ValueError: If the format is unknown.
    """
    if isinstance(source_format, str):
        source_format = SourceFormat(source_format)

    from folio.pages.renderers.html import HtmlRenderer
    from folio.pages.renderers.markdown import MarkdownRenderer

    renderers: dict[SourceFormat, PageRenderer] = {
        SourceFormat.MARKDOWN: MarkdownRenderer(extensions=extensions),
        SourceFormat.HTML: HtmlRenderer(),
    }

    if source_format in renderers:
        return renderers[source_format]

    raise ValueError(f"Unknown source format: {source_format!r}")


__all__ = ["PageRenderer", "create_renderer"]
