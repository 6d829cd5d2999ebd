"""
Command-line interface for pdfdrawx.
"""

import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from pdfdrawx import __version__
from pdfdrawx.demos import DEMOS, build_demo
from pdfdrawx.exceptions import PDFDrawError
from pdfdrawx.types import CompressionMode, DocumentOptions
from pdfdrawx.utils import configure_logging

console = Console(stderr=True)

COMPRESSION_CHOICES = ["none", "text", "image", "metadata", "all"]


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """
    pdfdrawx - Build PDF documents from pages, paths, text and fonts.
    """
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="demos")
def list_demos():
    """
    List the demo documents that can be built.
    """
    table = Table(title="Demos")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="green")
    table.add_column("Needs --font", style="yellow")

    for demo in DEMOS.values():
        table.add_row(demo.name, demo.description, "yes" if demo.needs_font else "")

    console.print(table)


@cli.command(name="demo")
@click.argument("name", type=click.Choice(sorted(DEMOS)))
@click.option(
    "--font", "-f",
    "font_path",
    type=click.Path(exists=True, dir_okay=False),
    help="TrueType font file for demos that load one",
)
@click.option("--no-embed", is_flag=True, help="Reference the TrueType font by name instead of embedding it")
@click.option(
    "--compression", "-c",
    type=click.Choice(COMPRESSION_CHOICES),
    default=None,
    help="Compression mode for the written streams",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Output file (defaults to stdout)",
)
def demo(name, font_path, no_embed, compression, output):
    """
    Build a demo document and write the PDF.

    Examples:

        pdfdrawx demo lines -o lines.pdf

        pdfdrawx demo truetype-fonts --font Megrim.ttf -c all > fonts.pdf
    """
    font_data = None
    if DEMOS[name].needs_font:
        if font_path is None:
            console.print(f"[bold red]✗ Error:[/bold red] Demo '{name}' needs a TrueType font (--font)")
            sys.exit(1)
        with open(font_path, "rb") as handle:
            font_data = handle.read()

    options = None
    if compression is not None:
        options = DocumentOptions(compression_mode=CompressionMode.parse(compression))

    try:
        document = build_demo(name, font_data=font_data, embedding=not no_embed, options=options)
        with document:
            data = document.get_data()
    except PDFDrawError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    if output:
        with open(output, "wb") as handle:
            handle.write(data)
        console.print(f"[bold green]✓ Wrote {len(data)} bytes to {output}[/bold green]")
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
