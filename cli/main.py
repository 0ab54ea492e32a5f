"""harvest CLI: fetch a page and print structured records.

Usage:
    python cli/main.py --help

Commands:
    recipes   → list the built-in extractions
    run       → fetch a page and apply a recipe
    select    → fetch a page and extract text/attributes of a CSS selector
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from harvest.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import List, Optional

import typer

from harvest.config import settings
from harvest.scraper import RECIPES, AttrField, RunResult, TextField, get_recipe, run, run_recipe

from cli.rendering import RENDERERS, absolutize

app = typer.Typer(
    name="harvest",
    help="Fetch a single HTML page and extract structured records.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("harvest").setLevel(level)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """Fetch a single HTML page and extract structured records."""
    _configure_logging(verbose)


def _emit(result: RunResult, fmt: str, absolute: bool) -> None:
    """Print *result* in *fmt*, or report the failed stage and exit 1."""
    if result.error is not None:
        typer.echo(f"Error [{result.failed_stage}]: {result.error}", err=True)
        raise typer.Exit(code=1)

    records = result.records
    if absolute:
        records = absolutize(records, result.final_url or result.url)
    if records:
        typer.echo(RENDERERS[fmt](records))
    else:
        typer.echo("No records found.", err=True)

    for failure in result.failures:
        typer.echo(f"⚠️  record {failure.index} ({failure.node!r}): {failure.error}", err=True)


def _check_format(fmt: str) -> None:
    if fmt not in RENDERERS:
        typer.echo(f"Unknown format {fmt!r}. Use: {' | '.join(RENDERERS)}", err=True)
        raise typer.Exit(code=1)


@app.command("recipes")
def list_recipes() -> None:
    """List the built-in recipes."""
    for name in sorted(RECIPES):
        typer.echo(f"  {name:<12} {RECIPES[name].description}")


@app.command("run")
def run_cmd(
    recipe: str = typer.Argument(..., help="Recipe name (see `recipes`)."),
    url: Optional[str] = typer.Option(None, help="Page URL (defaults to HARVEST_DEFAULT_URL)."),
    fmt: str = typer.Option("table", "--format", help="Output format: table | lines | json."),
    absolute: bool = typer.Option(False, "--absolute", help="Resolve relative hrefs for display."),
    timeout: Optional[float] = typer.Option(None, help="Request timeout in seconds."),
) -> None:
    """Fetch a page and apply a recipe to it."""
    _check_format(fmt)
    try:
        selected = get_recipe(recipe)
    except KeyError as exc:
        typer.echo(f"Error: {exc.args[0]}", err=True)
        raise typer.Exit(code=1)

    result = run_recipe(selected, url or settings.default_url, timeout=timeout)
    _emit(result, fmt, absolute)


@app.command("select")
def select_cmd(
    selector: str = typer.Argument(..., help="CSS selector for the record elements."),
    url: str = typer.Option(..., help="Page URL."),
    attrs: Optional[List[str]] = typer.Option(None, "--attr", "-a", help="Attribute to extract (repeatable)."),
    fmt: str = typer.Option("table", "--format", help="Output format: table | lines | json."),
    absolute: bool = typer.Option(False, "--absolute", help="Resolve relative hrefs for display."),
    timeout: Optional[float] = typer.Option(None, help="Request timeout in seconds."),
) -> None:
    """Fetch a page and extract text (plus attributes) of every selector match."""
    _check_format(fmt)
    if "text" in (attrs or []):
        typer.echo("Error: --attr text collides with the text column.", err=True)
        raise typer.Exit(code=1)

    fields = {"text": TextField(strip=True)}
    for name in attrs or []:
        fields[name] = AttrField(name)

    result = run(url, selector, fields, timeout=timeout)
    _emit(result, fmt, absolute)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
