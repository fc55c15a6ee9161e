"""Page shell: the fixed layout every rendered post is placed into."""

from __future__ import annotations

import hashlib
import logging
from datetime import UTC, date, datetime, time
from email.utils import format_datetime
from pathlib import Path

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)
from pydantic import BaseModel

from folio.config import FolioConfig
from folio.errors import TemplateRenderError
from folio.pages.models import Post

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

PAGE_TEMPLATE = "page.html"
INDEX_TEMPLATE = "index.html"
FEED_TEMPLATE = "feed.xml"


class ListingEntry(BaseModel):
    """A post as it appears in the index page and feed."""

    post: Post
    url: str
    pub_date: str = ""


def _rfc822(day: date) -> str:
    return format_datetime(datetime.combine(day, time(0, 0), tzinfo=UTC))


class PageShell:
    """Renders posts, the index page, and the feed through Jinja2 templates.

    Bundled templates are always available; a ``templates_dir`` from the
    build config is searched first, so any template can be overridden by
    dropping a file with the same name there.
    """

    def __init__(self, config: FolioConfig) -> None:
        self.config = config
        self._search_dirs = self._template_dirs()
        self.env = Environment(
            loader=ChoiceLoader([FileSystemLoader(str(d)) for d in self._search_dirs]),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def _template_dirs(self) -> list[Path]:
        dirs: list[Path] = []
        user_dir = self.config.build.templates_path
        if user_dir is not None:
            if user_dir.is_dir():
                dirs.append(user_dir)
            else:
                logger.warning("Templates directory not found: %s", user_dir)
        dirs.append(DEFAULT_TEMPLATES_DIR)
        return dirs

    def fingerprint(self) -> str:
        """Hash of the templates in effect, for change detection."""
        digest = hashlib.sha256()
        for name in (PAGE_TEMPLATE, "base.html"):
            for directory in self._search_dirs:
                candidate = directory / name
                if candidate.is_file():
                    digest.update(candidate.read_bytes())
                    break
        return digest.hexdigest()[:16]

    def render_page(self, post: Post, body_html: str) -> str:
        """Place a rendered post body into the page layout."""
        return self._render(
            PAGE_TEMPLATE,
            post=post,
            body=body_html,
            page_url=self.config.url_for(post.slug),
        )

    def render_index(self, posts: list[Post]) -> str:
        """Render the index page listing ``posts`` in the given order."""
        entries = [ListingEntry(post=p, url=self.config.url_for(p.slug)) for p in posts]
        return self._render(INDEX_TEMPLATE, entries=entries)

    def render_feed(self, posts: list[Post], built_at: datetime | None = None) -> str:
        """Render an RSS 2.0 feed of the newest dated posts."""
        dated = [p for p in posts if p.published is not None]
        dated.sort(key=lambda p: p.published, reverse=True)
        entries = [
            ListingEntry(
                post=p,
                url=self.config.url_for(p.slug),
                pub_date=_rfc822(p.published),
            )
            for p in dated[: self.config.build.feed_limit]
        ]
        return self._render(
            FEED_TEMPLATE,
            entries=entries,
            built_at=format_datetime(built_at) if built_at is not None else "",
        )

    def _render(self, template_name: str, **context: object) -> str:
        feed_url = self.config.site.absolute_url("/feed.xml") if self.config.build.feed else ""
        try:
            template = self.env.get_template(template_name)
            return template.render(site=self.config.site, feed_url=feed_url, **context)
        except TemplateError as exc:
            raise TemplateRenderError(template_name, str(exc)) from exc
