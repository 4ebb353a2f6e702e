"""CLI command: flowbridge route -- split CSS into native and embed parts."""

from __future__ import annotations

from pathlib import Path

import click

from flowbridge.routing import route_css, wrap_embed


@click.command()
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--embed-out", type=click.Path(dir_okay=False), default=None,
              help="Write the <style> embed block to this file.")
def route(css_file: str, embed_out: str | None) -> None:
    """Classify every rule in CSS_FILE as native or embed.

    Prints the native CSS followed by a summary of the routing decisions.
    """
    result = route_css(Path(css_file).read_text(encoding="utf-8"))

    click.echo(result.native)
    click.echo()
    stats = result.stats
    click.echo(
        f"Rules: {stats.total_rules} total, {stats.native_rules} native, "
        f"{stats.embed_rules} embed, {stats.at_rules_extracted} at-rule(s)"
    )
    for decision in result.decisions:
        if decision.needs_embed:
            click.echo(f"  embed  {decision.selector}  ({decision.reason})")
    for warning in result.warnings:
        click.echo(str(warning), err=True)

    if embed_out:
        Path(embed_out).write_text(wrap_embed(result.embed), encoding="utf-8")
        click.echo(f"Embed: {stats.embed_size_bytes} bytes written to {embed_out}")
