from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, NoReturn

import typer
import yaml

from finrel.canonical import normalize_for_json
from finrel.classify import classify
from finrel.constants import EXIT_INVALID_INPUT, EXIT_RELATION_ERROR, EXIT_SUCCESS, LOG_LEVEL_ENV
from finrel.document import RelationDocument, dump_relation, load_relation_document, parse_element
from finrel.errors import RelationError
from finrel.report import render_json, render_markdown

logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        from finrel import __version__

        typer.echo(f"finrel {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")
    # basicConfig is a no-op once the root logger has handlers.
    logging.getLogger("finrel").setLevel(level)


app = typer.Typer(add_completion=False, help="Inspect and combine finite binary relations")


@app.callback(invoke_without_command=True)
def _main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _configure_logging(verbose)


def _fail(exc: Exception, exit_code: int) -> NoReturn:
    typer.echo(f"ERROR: {exc}", err=True)
    raise typer.Exit(exit_code) from exc


def _load(path: Path) -> RelationDocument:
    try:
        return load_relation_document(path)
    except RelationError as exc:
        _fail(exc, EXIT_RELATION_ERROR)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        _fail(exc, EXIT_INVALID_INPUT)


def _element(text: str) -> Any:
    try:
        return parse_element(text)
    except (ValueError, yaml.YAMLError) as exc:
        _fail(exc, EXIT_INVALID_INPUT)


def _echo_elements(elements: frozenset[Any]) -> None:
    typer.echo(json.dumps(normalize_for_json(elements)))


@app.command()
def inspect(
    path: Path = typer.Argument(..., help="Relation document (YAML)"),
    output_format: str = typer.Option("markdown", "--format", help="Output format: markdown|json"),
) -> None:
    """Classify a relation and print a report."""
    if output_format not in {"markdown", "json"}:
        typer.echo(f"ERROR: unsupported format {output_format!r}", err=True)
        raise typer.Exit(EXIT_INVALID_INPUT)
    document = _load(path)
    profile = classify(document.relation)
    if output_format == "json":
        typer.echo(render_json(document.name, document.relation, profile))
    else:
        typer.echo(render_markdown(document.name, document.relation, profile))
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def image(
    path: Path = typer.Argument(..., help="Relation document (YAML)"),
    element: str = typer.Argument(..., help="Left element, parsed as a YAML scalar"),
) -> None:
    """Print the image of ELEMENT as a JSON list."""
    document = _load(path)
    _echo_elements(document.relation.image(_element(element)))
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def preimage(
    path: Path = typer.Argument(..., help="Relation document (YAML)"),
    element: str = typer.Argument(..., help="Right element, parsed as a YAML scalar"),
) -> None:
    """Print the preimage of ELEMENT as a JSON list."""
    document = _load(path)
    _echo_elements(document.relation.preimage(_element(element)))
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def inverse(path: Path = typer.Argument(..., help="Relation document (YAML)")) -> None:
    """Print the inverse relation as a relation document."""
    document = _load(path)
    typer.echo(dump_relation(document.relation.inverse(), f"{document.name}-inverse"), nl=False)
    raise typer.Exit(EXIT_SUCCESS)


@app.command()
def compose(
    first: Path = typer.Argument(..., help="Relation applied first"),
    second: Path = typer.Argument(..., help="Relation applied second"),
) -> None:
    """Print FIRST composed with SECOND as a relation document."""
    left = _load(first)
    right = _load(second)
    try:
        composed = left.relation.compose(right.relation)
    except RelationError as exc:
        _fail(exc, EXIT_RELATION_ERROR)
    logger.debug("Composed %s with %s", left.name, right.name)
    typer.echo(dump_relation(composed, f"{left.name}-then-{right.name}"), nl=False)
    raise typer.Exit(EXIT_SUCCESS)
