"""Tests for single-document rendering and the site builder."""

from pathlib import Path

import pytest

from folio.config import BuildConfig, FolioConfig, SiteConfig
from folio.errors import ContentNotFoundError, EmptyPostError, MarkdownExtensionError
from folio.pages.models import Post
from folio.pages.services import (
    STATE_FILENAME,
    SiteBuilder,
    load_build_state,
    render_file,
    render_post,
)

CORS_POST = """\
---
title: Understanding CORS
description: Why the browser blocks your fetch
date: 2023-04-12
---

The browser enforces the same-origin policy.
"""

SWIFT_PAGE = """\
<html><head><title>Swift Concurrency Tips</title></head>
<body><h1>Swift Concurrency Tips</h1><p>Prefer structured concurrency.</p></body></html>
"""


@pytest.fixture
def site(tmp_path: Path) -> Path:
    content = tmp_path / "content"
    content.mkdir()
    (content / "cors.md").write_text(CORS_POST, encoding="utf-8")
    (content / "swift.html").write_text(SWIFT_PAGE, encoding="utf-8")
    static = tmp_path / "static" / "css"
    static.mkdir(parents=True)
    (static / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    return tmp_path


def _config(root: Path, **build) -> FolioConfig:
    defaults = {
        "content_dir": str(root / "content"),
        "output_dir": str(root / "public"),
        "static_dir": str(root / "static"),
    }
    defaults.update(build)
    return FolioConfig(
        site=SiteConfig(title="Field Notes", base_url="https://example.com"),
        build=BuildConfig(**defaults),
    )


class TestRenderPost:
    def test_output_contains_title_and_body(self, site: Path):
        html = render_file(site / "content" / "cors.md", _config(site))
        assert "Understanding CORS" in html
        assert "The browser enforces the same-origin policy." in html
        assert '<link rel="stylesheet" href="/css/style.css">' in html

    def test_missing_file_fails(self, site: Path):
        with pytest.raises(ContentNotFoundError):
            render_file(site / "content" / "missing.md", _config(site))

    def test_empty_published_post_fails(self, site: Path):
        post = Post(slug="empty", title="Empty", body="  \n")
        with pytest.raises(EmptyPostError) as exc_info:
            render_post(post, _config(site))
        assert exc_info.value.slug == "empty"

    def test_empty_draft_renders(self, site: Path):
        post = Post(slug="wip", title="Work in Progress", body="", draft=True)
        assert "Work in Progress" in render_post(post, _config(site))


class TestSiteBuilder:
    def test_writes_pages_index_and_feed(self, site: Path):
        result = SiteBuilder(_config(site)).build()
        public = site / "public"

        assert sorted(result.written) == ["cors", "swift"]
        assert (public / "cors.html").exists()
        assert (public / "swift.html").exists()
        assert result.index_path == public / "index.html"
        assert result.feed_path == public / "feed.xml"
        assert (public / STATE_FILENAME).exists()

        cors = (public / "cors.html").read_text(encoding="utf-8")
        assert "Understanding CORS" in cors
        assert "The browser enforces the same-origin policy." in cors

        swift = (public / "swift.html").read_text(encoding="utf-8")
        assert "<p>Prefer structured concurrency.</p>" in swift
        assert swift.count("<h1") == 1

        index = (public / "index.html").read_text(encoding="utf-8")
        assert 'href="/cors.html"' in index
        assert 'href="/swift.html"' in index

    def test_copies_static_files(self, site: Path):
        SiteBuilder(_config(site)).build()
        assert (site / "public" / "css" / "style.css").read_text() == "body { margin: 0; }"

    def test_pretty_urls(self, site: Path):
        SiteBuilder(_config(site, pretty_urls=True)).build()
        assert (site / "public" / "cors" / "index.html").exists()
        index = (site / "public" / "index.html").read_text(encoding="utf-8")
        assert 'href="/cors/"' in index

    def test_second_build_skips_unchanged(self, site: Path):
        SiteBuilder(_config(site)).build()
        result = SiteBuilder(_config(site)).build()
        assert result.written == []
        assert sorted(result.skipped) == ["cors", "swift"]

    def test_changed_source_is_rebuilt(self, site: Path):
        SiteBuilder(_config(site)).build()
        (site / "content" / "cors.md").write_text(
            CORS_POST + "\nPreflight requests use OPTIONS.\n", encoding="utf-8"
        )
        result = SiteBuilder(_config(site)).build()
        assert result.written == ["cors"]
        assert "Preflight requests use OPTIONS." in (site / "public" / "cors.html").read_text()

    def test_site_config_change_rebuilds(self, site: Path):
        SiteBuilder(_config(site)).build()
        config = _config(site)
        config.site.title = "Renamed"
        result = SiteBuilder(config).build()
        assert sorted(result.written) == ["cors", "swift"]

    def test_force_rebuilds_everything(self, site: Path):
        SiteBuilder(_config(site)).build()
        result = SiteBuilder(_config(site)).build(force=True)
        assert sorted(result.written) == ["cors", "swift"]

    def test_deleted_output_is_rebuilt(self, site: Path):
        SiteBuilder(_config(site)).build()
        (site / "public" / "cors.html").unlink()
        result = SiteBuilder(_config(site)).build()
        assert result.written == ["cors"]

    def test_removed_source_deletes_output(self, site: Path):
        SiteBuilder(_config(site)).build()
        (site / "content" / "swift.html").unlink()
        result = SiteBuilder(_config(site)).build()
        assert result.removed == ["swift"]
        assert not (site / "public" / "swift.html").exists()
        assert load_build_state(site / "public").slugs == ["cors"]

    def test_removed_pretty_page_cleans_directory(self, site: Path):
        SiteBuilder(_config(site, pretty_urls=True)).build()
        (site / "content" / "swift.html").unlink()
        SiteBuilder(_config(site, pretty_urls=True)).build()
        assert not (site / "public" / "swift").exists()

    def test_drafts_skipped_by_default(self, site: Path):
        (site / "content" / "wip.md").write_text("---\ndraft: true\n---\n", encoding="utf-8")
        result = SiteBuilder(_config(site)).build()
        assert result.drafts == ["wip"]
        assert not (site / "public" / "wip.html").exists()

    def test_drafts_included_on_request(self, site: Path):
        (site / "content" / "wip.md").write_text(
            "---\ndraft: true\n---\nHalf an idea.", encoding="utf-8"
        )
        result = SiteBuilder(_config(site)).build(include_drafts=True)
        assert "wip" in result.written
        assert (site / "public" / "wip.html").exists()

    def test_empty_published_post_fails_build(self, site: Path):
        (site / "content" / "empty.md").write_text("---\ntitle: Empty\n---\n", encoding="utf-8")
        with pytest.raises(EmptyPostError):
            SiteBuilder(_config(site)).build()

    def test_missing_content_dir_fails_build(self, tmp_path: Path):
        with pytest.raises(ContentNotFoundError):
            SiteBuilder(_config(tmp_path)).build()

    def test_feed_disabled(self, site: Path):
        result = SiteBuilder(_config(site, feed=False)).build()
        assert result.feed_path is None
        assert not (site / "public" / "feed.xml").exists()

    def test_index_post_replaces_listing(self, site: Path):
        (site / "content" / "index.md").write_text("# Welcome\n\nHello there.", encoding="utf-8")
        result = SiteBuilder(_config(site)).build()
        index = (site / "public" / "index.html").read_text(encoding="utf-8")
        assert result.index_path == site / "public" / "index.html"
        assert "Hello there." in index
        assert "post-list" not in index

    def test_index_post_is_home_page_with_pretty_urls(self, site: Path):
        (site / "content" / "index.md").write_text("# Welcome\n\nHello there.", encoding="utf-8")
        result = SiteBuilder(_config(site, pretty_urls=True)).build()
        home = site / "public" / "index.html"
        assert result.index_path == home
        assert "Hello there." in home.read_text(encoding="utf-8")
        assert not (site / "public" / "index" / "index.html").exists()
        assert (site / "public" / "cors" / "index.html").exists()

    def test_switching_to_pretty_urls_removes_flat_pages(self, site: Path):
        SiteBuilder(_config(site)).build()
        assert (site / "public" / "cors.html").exists()

        result = SiteBuilder(_config(site, pretty_urls=True)).build()
        assert sorted(result.written) == ["cors", "swift"]
        assert (site / "public" / "cors" / "index.html").exists()
        assert not (site / "public" / "cors.html").exists()
        assert not (site / "public" / "swift.html").exists()

    def test_switching_back_to_flat_removes_page_directories(self, site: Path):
        SiteBuilder(_config(site, pretty_urls=True)).build()
        SiteBuilder(_config(site)).build()
        assert (site / "public" / "cors.html").exists()
        assert not (site / "public" / "cors").exists()

    def test_included_drafts_not_listed(self, site: Path):
        (site / "content" / "wip.md").write_text(
            "---\ntitle: Half Baked\ndraft: true\ndate: 2024-01-01\n---\nHalf an idea.",
            encoding="utf-8",
        )
        SiteBuilder(_config(site)).build(include_drafts=True)
        assert (site / "public" / "wip.html").exists()
        index = (site / "public" / "index.html").read_text(encoding="utf-8")
        feed = (site / "public" / "feed.xml").read_text(encoding="utf-8")
        assert "Half Baked" not in index
        assert "Half Baked" not in feed
        assert "Understanding CORS" in index

    def test_disabling_feed_removes_old_feed(self, site: Path):
        SiteBuilder(_config(site)).build()
        assert (site / "public" / "feed.xml").exists()
        SiteBuilder(_config(site, feed=False)).build()
        assert not (site / "public" / "feed.xml").exists()

    def test_unknown_markdown_extension_fails_build(self, site: Path):
        config = _config(site, markdown_extensions=["no_such_extension"])
        with pytest.raises(MarkdownExtensionError):
            SiteBuilder(config).build()
