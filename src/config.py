"""Unified configuration loaded from .folio.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".folio.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "folio" / "config.toml"

DEFAULT_MARKDOWN_EXTENSIONS = ["extra", "sane_lists", "smarty"]
HOME_SLUG = "index"


class SiteConfig(BaseModel):
    """[site] section."""

    title: str = "Blog"
    description: str = ""
    author: str = ""
    base_url: str = ""
    language: str = "en"
    stylesheets: list[str] = Field(default_factory=lambda: ["/css/style.css"])
    scripts: list[str] = Field(default_factory=lambda: ["/js/main.js"])

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def absolute_url(self, path: str) -> str:
        """Join a site-relative path onto ``base_url``.

        Already absolute URLs and an empty ``base_url`` return ``path``
        unchanged.
        """
        if not path or "://" in path or not self.base_url:
            return path
        return f"{self.base_url}/{path.lstrip('/')}"


class BuildConfig(BaseModel):
    """[build] section."""

    content_dir: str = "content"
    output_dir: str = "public"
    static_dir: str = "static"
    templates_dir: str = ""
    pretty_urls: bool = False
    include_drafts: bool = False
    markdown_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MARKDOWN_EXTENSIONS)
    )
    feed: bool = True
    feed_limit: int = 20

    @property
    def content_path(self) -> Path:
        return Path(self.content_dir)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)

    @property
    def static_path(self) -> Path | None:
        return Path(self.static_dir) if self.static_dir else None

    @property
    def templates_path(self) -> Path | None:
        return Path(self.templates_dir) if self.templates_dir else None


class FolioConfig(BaseModel):
    """Top-level configuration model for building a site."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    def url_for(self, slug: str) -> str:
        """Site-relative URL of the page rendered for ``slug``.

        The ``index`` slug is the home page and always maps to ``/``.
        """
        if slug == HOME_SLUG:
            return "/"
        if self.build.pretty_urls:
            return f"/{slug}/"
        return f"/{slug}.html"

    def output_file_for(self, slug: str) -> Path:
        """Output file path of the page rendered for ``slug``."""
        if slug == HOME_SLUG:
            return self.build.output_path / "index.html"
        if self.build.pretty_urls:
            return self.build.output_path / slug / "index.html"
        return self.build.output_path / f"{slug}.html"


def load_config(path: str | Path | None = None) -> FolioConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .folio.toml in CWD
    3. ~/.config/folio/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged FolioConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = FolioConfig.model_validate(data) if data else FolioConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: FolioConfig, **cli_kwargs: object) -> FolioConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, e.g. ``output_dir`` or ``base_url``.

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "content_dir": ("build", "content_dir"),
        "output_dir": ("build", "output_dir"),
        "static_dir": ("build", "static_dir"),
        "templates_dir": ("build", "templates_dir"),
        "include_drafts": ("build", "include_drafts"),
        "pretty_urls": ("build", "pretty_urls"),
        "base_url": ("site", "base_url"),
        "site_title": ("site", "title"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key not in mapping:
            logger.debug("Ignoring unknown CLI override %s", key)
            continue
        section, field = mapping[key]
        data[section][field] = str(value) if isinstance(value, Path) else value

    return FolioConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: FolioConfig) -> FolioConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "FOLIO_CONTENT_DIR": ("build", "content_dir"),
        "FOLIO_OUTPUT_DIR": ("build", "output_dir"),
        "FOLIO_STATIC_DIR": ("build", "static_dir"),
        "FOLIO_TEMPLATES_DIR": ("build", "templates_dir"),
        "FOLIO_BASE_URL": ("site", "base_url"),
        "FOLIO_SITE_TITLE": ("site", "title"),
    }

    changed = False
    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value:
            data[section][field] = value
            changed = True

    if changed:
        return FolioConfig.model_validate(data)
    return config
