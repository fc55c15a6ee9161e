"""CLI interface for folio."""

import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from folio.config import FolioConfig, load_config, merge_cli_overrides
from folio.errors import FolioError
from folio.pages.reader import ContentReader
from folio.pages.services import SiteBuilder, render_file

app = typer.Typer(
    name="folio",
    help="Render Markdown and HTML posts into a static blog.",
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Path to a .folio.toml file. Defaults to ./.folio.toml.",
        dir_okay=False,
    ),
]

ContentDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--content-dir",
        help="Directory containing Markdown and HTML posts.",
        file_okay=False,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from folio import __version__

        console.print(f"folio {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: FolioError) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(1)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output."),
    ] = False,
) -> None:
    """Folio - render Markdown and HTML posts into a static blog."""
    _configure_logging(verbose)


@app.command()
def build(
    config_path: ConfigOption = None,
    content_dir: ContentDirOption = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Output directory for the rendered site. Defaults to ./public/",
        ),
    ] = None,
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", help="Absolute URL the site is served from."),
    ] = None,
    drafts: Annotated[
        Optional[bool],
        typer.Option("--drafts/--no-drafts", help="Publish posts marked draft."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Rebuild pages even if unchanged."),
    ] = False,
) -> None:
    """Build every post into static HTML pages.

    Unchanged posts are skipped unless --force is given. Pages whose
    source file has been deleted are removed from the output.
    """
    config = merge_cli_overrides(
        load_config(config_path),
        content_dir=content_dir,
        output_dir=output,
        base_url=base_url,
        include_drafts=drafts,
    )
    builder = SiteBuilder(config)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task("Building site...", total=None)
            result = builder.build(force=force)
    except FolioError as exc:
        _fail(exc)

    console.print("[bold green]Build complete![/bold green]")
    console.print(f"  Written: {len(result.written)}")
    console.print(f"  Unchanged: {len(result.skipped)}")
    if result.removed:
        console.print(f"  Removed: {len(result.removed)}")
    if result.drafts:
        console.print(f"  Drafts skipped: {len(result.drafts)}")
    console.print(f"  Output: {config.build.output_path}")


@app.command()
def render(
    source: Annotated[
        Path,
        typer.Argument(help="Markdown or HTML file to render."),
    ],
    config_path: ConfigOption = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the page here instead of stdout."),
    ] = None,
) -> None:
    """Render a single post to a complete HTML page."""
    config = load_config(config_path)
    try:
        html = render_file(source, config)
    except FolioError as exc:
        _fail(exc)

    if output is None:
        typer.echo(html, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    console.print(f"Wrote {output}")


@app.command(name="list")
def list_cmd(
    config_path: ConfigOption = None,
    content_dir: ContentDirOption = None,
    drafts: Annotated[
        bool,
        typer.Option("--drafts/--no-drafts", help="Include posts marked draft."),
    ] = True,
) -> None:
    """List the posts found in the content directory."""
    config: FolioConfig = merge_cli_overrides(load_config(config_path), content_dir=content_dir)
    try:
        posts = ContentReader().read_all(config.build.content_path)
    except FolioError as exc:
        _fail(exc)

    if not drafts:
        posts = [p for p in posts if not p.draft]

    if not posts:
        console.print("[yellow]No posts found.[/yellow]")
        console.print(f"Searched in: {config.build.content_path}")
        raise typer.Exit(0)

    table = Table(title=f"{len(posts)} post(s)")
    table.add_column("Slug")
    table.add_column("Title")
    table.add_column("Date")
    table.add_column("Format")
    table.add_column("Draft")
    for post in posts:
        table.add_row(
            post.slug,
            post.title,
            post.published.isoformat() if post.published else "",
            post.source_format.value,
            "yes" if post.draft else "",
        )
    console.print(table)


if __name__ == "__main__":
    app()
