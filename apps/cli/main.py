
"""Typer CLI entrypoint: Perl::Critic JSON in, SARIF out."""
from __future__ import annotations

import io
import sys
from importlib import metadata
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from packages.config.settings import Settings, load_settings
from packages.critic_adapter.load_report import load
from packages.exporters.jsonl import write_jsonl
from packages.exporters.sarif import to_json, translate
from packages.schema.errors import (
    ConfigError,
    LoadError,
    MappingError,
    ProvenanceError,
)
from packages.schema.models import ViolationReport
from packages.schema.sarif import SarifDocument, VersionControlDetails
from packages.vcs.provenance import discover_provenance

app = typer.Typer(add_completion=False)
console = Console(stderr=True)

EXIT_BLOCKING = 1
EXIT_INVALID_INPUT = 2
EXIT_IO = 3
EXIT_INTERNAL = 4

_VALID_FORMATS = {"sarif", "jsonl", "table"}
# "none" disables the gate; otherwise results at or above the level block.
_LEVEL_RANK = {"none": 0, "note": 1, "warning": 2, "error": 3}


def _normalize_formats(values: Sequence[str]) -> List[str]:
    if not values:
        return ["sarif"]
    normalized = []
    for value in values:
        fmt = value.lower()
        if fmt not in _VALID_FORMATS:
            raise typer.BadParameter(
                f"Unsupported format '{value}'. Choose from {sorted(_VALID_FORMATS)}"
            )
        if fmt not in normalized:
            normalized.append(fmt)
    return normalized


def _version_callback(value: bool) -> None:
    if value:
        try:
            version = metadata.version("perlcritic-sarif")
        except metadata.PackageNotFoundError:
            version = "unknown"
        typer.echo(f"perlcritic-sarif {version}")
        raise typer.Exit()


@app.command()
def convert(
    input: Optional[Path] = typer.Option(
        None, "--input", "-i", help="Perl::Critic JSON report; reads stdin if omitted"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="SARIF output path; writes stdout if omitted"
    ),
    format: List[str] = typer.Option(
        ["sarif"], "--format", "-f", help="Repeatable option: sarif, jsonl, table"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML settings file (defaults to $PERLCRITIC_SARIF_CONFIG)"
    ),
    vcs: bool = typer.Option(
        False, "--vcs/--no-vcs", help="Attach git provenance of the current checkout"
    ),
    fail_on: str = typer.Option(
        "none", "--fail-on", help="Exit 1 when a result reaches this level: none|note|warning|error"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Convert a Perl::Critic JSON report into SARIF 2.1.0."""

    if fail_on not in _LEVEL_RANK:
        raise typer.BadParameter(
            f"Unsupported level '{fail_on}'. Choose from {sorted(_LEVEL_RANK)}",
            param_hint="--fail-on",
        )
    formats = _normalize_formats(format)
    if "jsonl" in formats and "sarif" in formats and output is None:
        raise typer.BadParameter(
            "--format jsonl together with sarif needs --output for the .jsonl sibling file",
            param_hint="--format",
        )

    try:
        settings = load_settings(config)
    except ConfigError as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        raise typer.Exit(code=EXIT_INVALID_INPUT) from exc

    raw = _read_input(input)
    if verbose:
        console.log(f"Read {len(raw)} bytes from {input or '<stdin>'}")

    try:
        report = load(raw)
    except LoadError as exc:
        console.print(f"[red]Invalid Perl::Critic report: {escape(str(exc))}[/]")
        raise typer.Exit(code=EXIT_INVALID_INPUT) from exc

    provenance: Optional[VersionControlDetails] = None
    if vcs:
        try:
            provenance = discover_provenance(Path.cwd())
        except ProvenanceError as exc:
            console.print(f"[red]Version control discovery failed: {escape(str(exc))}[/]")
            raise typer.Exit(code=EXIT_IO) from exc

    try:
        document = translate(report, settings, provenance)
    except MappingError as exc:
        console.print(f"[red]Internal mapping failure: {escape(str(exc))}[/]")
        raise typer.Exit(code=EXIT_INTERNAL) from exc

    results = document.runs[0].results
    if verbose:
        console.log(
            f"Translated {len(report.violations)} violation(s) into "
            f"{len(document.runs[0].tool.driver.rules)} rule(s) and {len(results)} result(s)"
        )

    _export(report, document, formats=formats, output=output, settings=settings)

    threshold = _LEVEL_RANK[fail_on]
    if threshold:
        blocking = [r for r in results if _LEVEL_RANK[r.level] >= threshold]
        if blocking:
            console.print(f"[red]{len(blocking)} result(s) at level '{fail_on}' or above[/]")
            raise typer.Exit(code=EXIT_BLOCKING)


def _read_input(path: Optional[Path]) -> bytes:
    try:
        if path is None:
            return sys.stdin.buffer.read()
        return path.read_bytes()
    except OSError as exc:
        console.print(f"[red]Cannot read input {path or '<stdin>'}: {escape(str(exc))}[/]")
        raise typer.Exit(code=EXIT_IO) from exc


def _write_text(path: Optional[Path], text: str) -> None:
    # Encode up front so a failure never leaves an empty or truncated file behind.
    try:
        data = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        console.print(f"[red]Cannot encode output as UTF-8: {escape(str(exc))}[/]")
        raise typer.Exit(code=EXIT_INTERNAL) from exc
    if path is None:
        typer.echo(text, nl=False)
        return
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        console.print(f"[red]Cannot write output {path}: {escape(str(exc))}[/]")
        raise typer.Exit(code=EXIT_IO) from exc


def _export(
    report: ViolationReport,
    document: SarifDocument,
    *,
    formats: Sequence[str],
    output: Optional[Path],
    settings: Settings,
) -> None:
    fmt_set = set(formats)

    if "sarif" in fmt_set:
        _write_text(output, to_json(document, indent=settings.indent) + "\n")

    if "jsonl" in fmt_set:
        jsonl_path = output
        if "sarif" in fmt_set and output is not None:
            jsonl_path = output.with_suffix(".jsonl")
        buffer = io.StringIO()
        write_jsonl(buffer, report, document)
        _write_text(jsonl_path, buffer.getvalue())

    if "table" in fmt_set:
        table = Table(title="Perl::Critic findings")
        table.add_column("Rule")
        table.add_column("Severity", justify="right")
        table.add_column("Level")
        table.add_column("Location")
        for violation, result in zip(report.violations, document.runs[0].results):
            location = f"{violation.filename}:{violation.line_number}:{violation.column_number}"
            table.add_row(result.ruleId, str(violation.severity), result.level, location)
        console.print(table)

if __name__ == "__main__":  # pragma: no cover - manual execution
    app()
