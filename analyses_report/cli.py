"""CLI entry point - command definitions using Click.

Note blobs are read from the files given as arguments (``-`` reads stdin),
one report per line, e.g. the output of
``git notes --ref refs/notes/devtools/analyses show HEAD``.

Commands:
    init     Generate a template config file
    parse    Valid reports found in the given notes
    latest   The most recent valid report
    notes    Analysis messages of the most recent valid report
"""

import functools
import json
import logging
import sys
from typing import Any

import click

from analyses_report import __version__


# ---------------------------------------------------------------------------
# Helpers shared by all data commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Load config. Exits on error."""
    from analyses_report.config import ConfigError, load

    try:
        return load(ctx.obj["config_path"])
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)


def _read_notes(note_files: tuple) -> list[bytes]:
    """Return one note blob per non-blank line of every file."""
    notes = []
    for f in note_files:
        with f:
            notes.extend(line.strip() for line in f.read().splitlines() if line.strip())
    return notes


def _valid_reports(ctx: click.Context, note_files: tuple):
    from analyses_report.reports.parser import parse_all_valid

    config = _load_config(ctx)
    notes = _read_notes(note_files)
    reports = parse_all_valid(notes, accepted_versions=config.accepted_versions)
    _verbose(ctx, f"{len(reports)} of {len(notes)} note(s) are valid reports")
    return config, reports


def _verbose(ctx: click.Context, message: str) -> None:
    if ctx.obj["verbose"]:
        click.echo(f"[verbose] {message}", err=True)


def _emit_json(data: Any, ctx: click.Context) -> None:
    """Write JSON to stdout or to the file specified by --output."""
    obj = ctx.obj
    indent = 2 if obj["pretty"] else None
    text = json.dumps(data, indent=indent, ensure_ascii=False)

    output_path: str | None = obj["output_path"]
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Output written to '{output_path}'", err=True)
    else:
        click.echo(text)


def _handle_errors(func):
    """Decorator that catches analyses errors and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from analyses_report.client import FetchError
        from analyses_report.models import AnalysesError
        from analyses_report.reports.fetcher import MalformedPayloadError
        from analyses_report.reports.selector import InvalidTimestampError

        try:
            return func(*args, **kwargs)
        except InvalidTimestampError as exc:
            click.echo(f"Timestamp error: {exc}", err=True)
            sys.exit(1)
        except FetchError as exc:
            click.echo(f"Network error: {exc}", err=True)
            sys.exit(1)
        except MalformedPayloadError as exc:
            click.echo(f"Payload error: {exc}", err=True)
            sys.exit(1)
        except AnalysesError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help="Path to a YAML configuration file.")
@click.option("--output", "output_path", default=None,
              help="Write JSON output to a file instead of stdout.")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print the JSON output.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="analyses-report")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, output_path: str | None,
        pretty: bool, verbose: bool) -> None:
    """Static-analysis reports stored in git notes - select and fetch, export as JSON."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["output_path"] = output_path
    ctx.obj["pretty"] = pretty
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="analyses-config.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template analyses-config.yaml file."""
    from analyses_report.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

@cli.command("parse")
@click.argument("note_files", nargs=-1, required=True, type=click.File("rb"))
@click.pass_context
@_handle_errors
def parse_command(ctx: click.Context, note_files: tuple) -> None:
    """Valid reports found in NOTE_FILES, in input order."""
    _, reports = _valid_reports(ctx, note_files)
    _emit_json([r.to_dict() for r in reports], ctx)


# ---------------------------------------------------------------------------
# latest
# ---------------------------------------------------------------------------

@cli.command("latest")
@click.argument("note_files", nargs=-1, required=True, type=click.File("rb"))
@click.pass_context
@_handle_errors
def latest_command(ctx: click.Context, note_files: tuple) -> None:
    """The valid report in NOTE_FILES with the most recent timestamp."""
    from analyses_report.reports.selector import select_latest

    _, reports = _valid_reports(ctx, note_files)
    latest = select_latest(reports)
    _emit_json(latest.to_dict() if latest is not None else None, ctx)


# ---------------------------------------------------------------------------
# notes
# ---------------------------------------------------------------------------

@cli.command("notes")
@click.argument("note_files", nargs=-1, required=True, type=click.File("rb"))
@click.pass_context
@_handle_errors
def notes_command(ctx: click.Context, note_files: tuple) -> None:
    """Analysis messages of the most recent valid report in NOTE_FILES."""
    from analyses_report.client import ResultsClient
    from analyses_report.models import REF
    from analyses_report.reports.fetcher import get_notes
    from analyses_report.reports.selector import select_latest

    config, reports = _valid_reports(ctx, note_files)
    latest = select_latest(reports)

    notes = []
    if latest is not None:
        _verbose(ctx, f"Fetching analysis messages from '{latest.url}'")
        with ResultsClient(timeout=config.timeout, headers=config.headers) as client:
            notes = get_notes(client, latest)

    _emit_json({
        "ref": REF,
        "report": latest.to_dict() if latest is not None else None,
        "notes": [n.to_dict() for n in notes],
    }, ctx)
