"""folio - render Markdown and HTML posts into a static blog."""

__version__ = "0.1.0"
