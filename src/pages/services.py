"""Business logic and I/O services for rendering and building a site.

Contains the functions and classes that touch disk: manifest I/O,
single-document rendering, and the whole-site builder. Imports models
from ``folio.pages.models``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path

from folio.config import HOME_SLUG, FolioConfig
from folio.errors import EmptyPostError
from folio.pages.models import BuildRecord, BuildResult, BuildState, Post, SourceFormat
from folio.pages.reader import ContentReader
from folio.pages.renderers import PageRenderer, create_renderer
from folio.pages.shell import PageShell

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

STATE_FILENAME = ".folio-build.json"
INDEX_FILENAME = "index.html"
FEED_FILENAME = "feed.xml"


# ---------------------------------------------------------------------------
# Build manifest I/O
# ---------------------------------------------------------------------------


def load_build_state(output_dir: Path) -> BuildState:
    """Load the build manifest from disk.

    Returns empty BuildState if file doesn't exist or is corrupt.
    """
    state_path = output_dir / STATE_FILENAME
    if not state_path.exists():
        return BuildState()
    try:
        data = json.loads(state_path.read_text(encoding="utf-8"))
        return BuildState.model_validate(data)
    except (json.JSONDecodeError, ValueError, KeyError):
        logger.warning("Corrupt build state at %s, starting fresh", state_path)
        return BuildState()


def save_build_state(state: BuildState, output_dir: Path) -> None:
    """Save the build manifest to disk."""
    state_path = output_dir / STATE_FILENAME
    state_path.parent.mkdir(parents=True, exist_ok=True)
    state_path.write_text(
        state.model_dump_json(indent=2),
        encoding="utf-8",
    )


# ---------------------------------------------------------------------------
# Single-document rendering
# ---------------------------------------------------------------------------


def _renderers(config: FolioConfig) -> dict[SourceFormat, PageRenderer]:
    return {
        fmt: create_renderer(fmt, extensions=config.build.markdown_extensions)
        for fmt in SourceFormat
    }


def render_post(
    post: Post,
    config: FolioConfig,
    shell: PageShell | None = None,
    renderer: PageRenderer | None = None,
) -> str:
    """Render one post into a complete HTML page.

    Raises:
        EmptyPostError: If the post is published but has no body.
    """
    if post.is_published and not post.has_body:
        raise EmptyPostError(post.slug, post.source_path)

    if renderer is None:
        renderer = create_renderer(
            post.source_format, extensions=config.build.markdown_extensions
        )
    if shell is None:
        shell = PageShell(config)

    body_html = renderer.render_body(post)
    return shell.render_page(post, body_html)


def render_file(path: Path, config: FolioConfig) -> str:
    """Read a content file and render it into a complete HTML page.

    Raises:
        ContentNotFoundError: If ``path`` does not exist.
    """
    post = ContentReader().read_file(path)
    return render_post(post, config)


# ---------------------------------------------------------------------------
# Site builder
# ---------------------------------------------------------------------------


class SiteBuilder:
    """Builds every post under the content directory into the output directory."""

    def __init__(
        self,
        config: FolioConfig,
        *,
        reader: ContentReader | None = None,
        shell: PageShell | None = None,
    ) -> None:
        self.config = config
        self.reader = reader or ContentReader()
        self.shell = shell or PageShell(config)
        self.renderers = _renderers(config)

    @property
    def output_dir(self) -> Path:
        return self.config.build.output_path

    def content_hash(self, post: Post) -> str:
        """Hash the inputs that determine a post's rendered page."""
        digest = hashlib.sha256()
        digest.update(post.source_path.read_bytes())
        digest.update(self.renderers[post.source_format].fingerprint().encode())
        digest.update(self.shell.fingerprint().encode())
        digest.update(self.config.site.model_dump_json().encode())
        digest.update(b"pretty" if self.config.build.pretty_urls else b"flat")
        return digest.hexdigest()

    def build(self, *, force: bool = False, include_drafts: bool | None = None) -> BuildResult:
        """Run a full or incremental build.

        Args:
            force: Rebuild every page even if its content is unchanged.
            include_drafts: Publish draft posts too. Defaults to the
                ``build.include_drafts`` config value.

        Returns:
            BuildResult describing what was written, skipped, and removed.

        Raises:
            ContentNotFoundError: If the content directory is missing.
            EmptyPostError: If a published post has an empty body.
        """
        if include_drafts is None:
            include_drafts = self.config.build.include_drafts

        result = BuildResult()
        posts = self.reader.read_all(self.config.build.content_path)
        state = load_build_state(self.output_dir)

        pages: list[Post] = []
        for post in posts:
            if post.draft and not include_drafts:
                result.drafts.append(post.slug)
                continue
            if post.is_published and not post.has_body:
                raise EmptyPostError(post.slug, post.source_path)
            pages.append(post)

        live_slugs = {p.slug for p in pages}
        for slug in state.slugs:
            if slug not in live_slugs:
                self._remove_page(state, slug)
                result.removed.append(slug)

        for post in pages:
            if self._build_page(post, state, force=force):
                result.written.append(post.slug)
            else:
                result.skipped.append(post.slug)

        listed = [p for p in pages if p.is_published]
        if HOME_SLUG in live_slugs:
            # A post slugged "index" is the home page; no generated listing.
            result.index_path = self.config.output_file_for(HOME_SLUG)
        else:
            result.index_path = self._write(
                self.output_dir / INDEX_FILENAME, self.shell.render_index(listed)
            )

        feed_path = self.output_dir / FEED_FILENAME
        if self.config.build.feed:
            feed = self.shell.render_feed(listed, built_at=datetime.now(UTC))
            result.feed_path = self._write(feed_path, feed)
        elif feed_path.is_file():
            feed_path.unlink()
            logger.info("Removed disabled feed %s", feed_path)

        self._copy_static()
        save_build_state(state, self.output_dir)

        logger.info(
            "Built %d pages (%d written, %d unchanged, %d removed)",
            result.total_pages,
            len(result.written),
            len(result.skipped),
            len(result.removed),
        )
        return result

    def _build_page(self, post: Post, state: BuildState, *, force: bool) -> bool:
        """Render and write one page. Returns False if it was up to date."""
        out_path = self.config.output_file_for(post.slug)
        digest = self.content_hash(post)
        if not force and state.is_current(post.slug, digest) and out_path.exists():
            logger.debug("Skipping unchanged %s", post.slug)
            return False

        html = render_post(
            post,
            self.config,
            shell=self.shell,
            renderer=self.renderers[post.source_format],
        )
        self._write(out_path, html)
        previous = state.get(post.slug)
        if previous is not None and Path(previous.output_path) != out_path:
            self._unlink_output(Path(previous.output_path))
        state.mark_built(
            BuildRecord(
                slug=post.slug,
                source_path=str(post.source_path),
                output_path=str(out_path),
                content_hash=digest,
                built_at=datetime.now(UTC),
            )
        )
        logger.debug("Wrote %s -> %s", post.slug, out_path)
        return True

    def _remove_page(self, state: BuildState, slug: str) -> None:
        record = state.forget(slug)
        if record is None:
            return
        self._unlink_output(Path(record.output_path))

    def _unlink_output(self, stale: Path) -> None:
        if not stale.is_file():
            return
        stale.unlink()
        logger.info("Removed stale page %s", stale)
        # Drop the empty directory left behind by pretty URLs.
        parent = stale.parent
        if parent != self.output_dir and parent.is_dir() and not any(parent.iterdir()):
            parent.rmdir()

    def _copy_static(self) -> None:
        static = self.config.build.static_path
        if static is None or not static.is_dir():
            return
        shutil.copytree(static, self.output_dir, dirs_exist_ok=True)
        logger.debug("Copied static files from %s", static)

    @staticmethod
    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
