"""CLI command: flowbridge diagnose -- report semantic loss without repair."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from flowbridge.css import parse_css
from flowbridge.diagnostics import DiagnosticContext, Severity, detect_failure_conditions, diagnose as run_diagnose
from flowbridge.diagnostics.model import DiagnosticReport
from flowbridge.graph import build_payload
from flowbridge.html import parse_fragment


@click.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
def diagnose(html_file: str, css_file: str) -> None:
    """Convert deterministically and print every diagnostic.

    Exits with code 0 when the output is clean, or code 1 if any issue
    was found.
    """
    html = Path(html_file).read_text(encoding="utf-8")
    stylesheet = parse_css(Path(css_file).read_text(encoding="utf-8"))

    root = parse_fragment(html)
    if root is None:
        click.echo("No root element found", err=True)
        sys.exit(1)

    payload, _ = build_payload(root, stylesheet.class_index)
    diagnostics = run_diagnose(DiagnosticContext(html, payload, stylesheet.class_index))

    if not diagnostics:
        click.echo(f"OK: {Path(html_file).name} converts cleanly (0 diagnostics)")
        sys.exit(0)

    for diag in diagnostics:
        click.echo(str(diag))

    errors = [d for d in diagnostics if d.severity is Severity.ERROR]
    warnings = [d for d in diagnostics if d.severity is Severity.WARNING]
    click.echo()
    click.echo(f"Summary: {len(errors)} error(s), {len(warnings)} warning(s)")

    detection = detect_failure_conditions(DiagnosticReport.from_diagnostics(diagnostics), html, payload)
    for reason in detection.reasons:
        click.echo(f"Repair trigger: {reason}")
    sys.exit(1)
