"""
Command-line interface for TourPage Copywriter.

Provides a CLI for generating website copy from a content template (CSV or
Excel) or from a free-form company/product description.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import (
    API_KEY_ENV_VARS,
    AUDIENCES,
    CONTENT_LENGTHS,
    DEFAULT_OUTPUT_FILENAME,
    LANGUAGE_OPTIONS,
    MARKETING_FOCUSES,
    PROVIDERS,
    SEO_MODES,
    GenerationConfig,
    ModelSettings,
)
from .csv_io import SpreadsheetLoadError, load_rows
from .errors import (
    EmptyResultError,
    ExternalServiceError,
    MalformedModelOutputError,
)
from .model_client import create_model_client
from .pipeline import CopyGenerator, GenerationResult

console = Console()


@click.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Content template to rewrite (CSV or Excel).",
)
@click.option(
    "--text",
    "-t",
    type=str,
    help="Company/product description to write copy from.",
)
@click.option(
    "--text-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Text file with the company/product description.",
)
@click.option(
    "--website-url",
    type=str,
    help="Company website URL (text mode only).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=DEFAULT_OUTPUT_FILENAME,
    show_default=True,
    help="Output path for the generated CSV.",
)
@click.option(
    "--sheet",
    type=str,
    help="Sheet name to read from an Excel template (default: first sheet).",
)
@click.option(
    "--api-key",
    type=str,
    help="Model API key. Defaults to GEMINI_API_KEY or ANTHROPIC_API_KEY, per provider.",
)
@click.option(
    "--provider",
    type=click.Choice(PROVIDERS),
    default="gemini",
    show_default=True,
    help="Model provider.",
)
@click.option("--model", type=str, help="Model identifier (default: provider default).")
@click.option(
    "--timeout",
    type=float,
    default=120.0,
    show_default=True,
    help="Request timeout in seconds.",
)
@click.option(
    "--audience",
    type=click.Choice(AUDIENCES),
    default="B2C",
    show_default=True,
    help="Target audience.",
)
@click.option(
    "--language",
    "-l",
    type=str,
    default="zh-TW",
    show_default=True,
    help=f"Target market language ({', '.join(LANGUAGE_OPTIONS)}).",
)
@click.option(
    "--focus",
    type=click.Choice(MARKETING_FOCUSES),
    default="brand",
    show_default=True,
    help="Marketing focus.",
)
@click.option("--keywords", "-k", type=str, default="", help="Content that must be mentioned.")
@click.option("--industry", type=str, default="", help="Industry category for competitor analysis.")
@click.option("--location", type=str, default="", help="Target location for local SEO.")
@click.option("--business-type", type=str, default="", help="Business type for structured data.")
@click.option("--competitors", type=str, default="", help="Competitor website URLs.")
@click.option(
    "--seo-mode",
    type=click.Choice(SEO_MODES),
    default="basic",
    show_default=True,
    help="SEO analysis depth.",
)
@click.option(
    "--content-length",
    type=click.Choice(CONTENT_LENGTHS),
    default="medium",
    show_default=True,
    help="Length of the generated copy.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
def main(
    input_file: Optional[Path],
    text: Optional[str],
    text_file: Optional[Path],
    website_url: Optional[str],
    output: Path,
    sheet: Optional[str],
    api_key: Optional[str],
    provider: str,
    model: Optional[str],
    timeout: float,
    audience: str,
    language: str,
    focus: str,
    keywords: str,
    industry: str,
    location: str,
    business_type: str,
    competitors: str,
    seo_mode: str,
    content_length: str,
    verbose: bool,
) -> None:
    """
    TourPage Copywriter - AI website copy with SEO analysis.

    Rewrites a client's content template into target-language copy, or writes
    copy from a free-form description, and exports a bilingual CSV.

    Examples:

        tourpage-copy --input template.csv --language en -o output.csv

        tourpage-copy --text "We run cycling tours in Taiwan" --audience B2C
    """
    if text_file:
        text = text_file.read_text(encoding="utf-8")

    if not input_file and not text and not website_url:
        console.print("[red]Error:[/red] Must provide --input, --text/--text-file or --website-url")
        sys.exit(1)

    if input_file and (text or website_url):
        console.print("[red]Error:[/red] Provide either a template (--input) or a description, not both")
        sys.exit(1)

    api_key = api_key or os.environ.get(API_KEY_ENV_VARS[provider])
    if not api_key:
        console.print(
            f"[red]Error:[/red] Missing API key. Use --api-key or set {API_KEY_ENV_VARS[provider]}"
        )
        sys.exit(1)

    _configure_logging(verbose)

    try:
        config = GenerationConfig(
            audience=audience,
            language=language,
            focus=focus,
            keywords=keywords,
            industry_category=industry,
            target_location=location,
            business_type=business_type,
            competitor_urls=competitors,
            seo_mode=seo_mode,
            content_length=content_length,
        )
        settings = ModelSettings(provider=provider, model=model, timeout=timeout)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    console.print(Panel.fit(
        "[bold blue]TourPage Copywriter[/bold blue]\n"
        f"Target: {config.language_name} | {config.audience} | {settings.model_name}",
        border_style="blue",
    ))

    try:
        rows = None
        if input_file:
            with console.status("[bold green]Loading template..."):
                rows = load_rows(input_file, sheet)
                if verbose:
                    console.print(f"  Loaded {len(rows)} rows from: {input_file}")

        with console.status("[bold green]Generating copy..."):
            result, data = asyncio.run(
                _generate(api_key, settings, config, rows, text or "", website_url)
            )

        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(data)

        _display_summary(result, verbose)

        console.print(f"\n[bold green]Success![/bold green] Output saved to: {output}")

    except SpreadsheetLoadError as e:
        console.print(f"[red]Template loading error:[/red] {e}")
        sys.exit(1)
    except EmptyResultError as e:
        console.print(f"[red]Template parsing error:[/red] {e}")
        sys.exit(1)
    except ExternalServiceError as e:
        console.print(f"[red]Model API error:[/red] {e}")
        sys.exit(1)
    except MalformedModelOutputError as e:
        console.print(f"[red]Model output error:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        sys.exit(1)


async def _generate(
    api_key: str,
    settings: ModelSettings,
    config: GenerationConfig,
    rows: Optional[list[list[str]]],
    text: str,
    website_url: Optional[str],
) -> tuple[GenerationResult, bytes]:
    """Run one generation and return the result with its CSV export."""
    async with create_model_client(api_key, settings) as client:
        generator = CopyGenerator(client, config)
        if rows is not None:
            result = await generator.generate_from_rows(rows)
        else:
            result = await generator.generate_from_text(text, website_url=website_url)
        return result, generator.export_csv(result)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _display_summary(result: GenerationResult, verbose: bool) -> None:
    """Display generation summary."""
    tree = result.tree
    console.print("\n[bold]Generation Summary[/bold]")

    table = Table(title="Generated Sections", show_header=True)
    table.add_column("Section", style="cyan")
    table.add_column("Items", style="green")

    for key in ("hero", "about", "contact"):
        if isinstance(tree.get(key), dict):
            table.add_row(key, str(len(tree[key])))
    for key in ("products", "solutions"):
        if isinstance(tree.get(key), list):
            table.add_row(key, str(len(tree[key])))
    console.print(table)

    seo = tree.get("seo")
    if isinstance(seo, dict):
        primary = seo.get("primaryKeywords")
        if isinstance(primary, list) and primary:
            console.print(f"\n[cyan]Primary keywords:[/cyan] {', '.join(str(k) for k in primary)}")

    if verbose:
        mode = "overlay" if result.from_template else "fresh"
        console.print(f"\n[dim]Export layout: {mode}[/dim]")


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
