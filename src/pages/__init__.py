"""Static page rendering for Markdown and HTML posts.

Reads content documents with optional front-matter, renders their
bodies, places them into the page shell, and writes the static site.
"""

from folio.pages.frontmatter import parse_frontmatter, split_frontmatter
from folio.pages.models import (
    BuildRecord,
    BuildResult,
    BuildState,
    Post,
    SourceFormat,
)
from folio.pages.reader import ContentReader, slug_for, sort_posts
from folio.pages.renderers import PageRenderer, create_renderer
from folio.pages.services import (
    SiteBuilder,
    load_build_state,
    render_file,
    render_post,
    save_build_state,
)
from folio.pages.shell import PageShell

__all__ = [
    "BuildRecord",
    "BuildResult",
    "BuildState",
    "ContentReader",
    "PageRenderer",
    "PageShell",
    "Post",
    "SiteBuilder",
    "SourceFormat",
    "create_renderer",
    "load_build_state",
    "parse_frontmatter",
    "render_file",
    "render_post",
    "save_build_state",
    "slug_for",
    "sort_posts",
    "split_frontmatter",
]
