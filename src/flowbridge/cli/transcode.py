"""CLI command: flowbridge transcode -- run the full pipeline."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from flowbridge.config import RepairConfig, TranscodeOptions
from flowbridge.pipeline import transcode as run_transcode


@click.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "out_file", type=click.Path(dir_okay=False), default=None,
              help="Write the payload JSON here instead of stdout.")
@click.option("--report", "show_report", is_flag=True, help="Print the transcoding report to stderr.")
@click.option("--no-repair", is_flag=True, help="Never call the repair model.")
@click.option("--force-repair", is_flag=True, help="Call the repair model even without failures.")
@click.option("--prefix", default=None, help="Node id prefix (default: derived from the root class).")
@click.option("--namespace", default="fp", show_default=True, help="Class namespace for the token payload.")
def transcode(
    html_file: str,
    css_file: str,
    out_file: str | None,
    show_report: bool,
    no_repair: bool,
    force_repair: bool,
    prefix: str | None,
    namespace: str,
) -> None:
    """Transcode HTML_FILE and CSS_FILE into an XscpData payload.

    Semantic repair runs only when FLOWBRIDGE_API_KEY or OPENROUTER_API_KEY
    is set. Exits with code 1 when the report status is FAIL.
    """
    html = Path(html_file).read_text(encoding="utf-8")
    css = Path(css_file).read_text(encoding="utf-8")
    options = TranscodeOptions(
        id_prefix=prefix,
        token_namespace=namespace,
        disable_semantic_recovery=no_repair,
        force_semantic_recovery=force_repair,
        repair=RepairConfig.from_env(os.environ),
    )

    result = run_transcode(html, css, options)

    payload_json = result.payload.to_json()
    if out_file:
        Path(out_file).write_text(payload_json, encoding="utf-8")
        click.echo(f"Wrote {len(result.payload.nodes)} nodes, {len(result.payload.styles)} styles to {out_file}")
    else:
        click.echo(payload_json)

    if result.routing.has_embed:
        click.echo(
            f"Note: {result.routing.stats.embed_rules} rule(s) need an embed block (see `flowbridge route`).",
            err=True,
        )
    if show_report:
        click.echo(json.dumps(result.report.to_dict(), indent=2), err=True)

    if not result.report.passed:
        sys.exit(1)
