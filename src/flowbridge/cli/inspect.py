"""CLI command: flowbridge inspect -- display the converted graph."""

from __future__ import annotations

from pathlib import Path

import click

from flowbridge.graph import convert


@click.command()
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--prefix", default=None, help="Node id prefix.")
def inspect(html_file: str, css_file: str, prefix: str | None) -> None:
    """Convert HTML_FILE and CSS_FILE and display nodes and styles.

    Shows each node with its type and classes, and each style with its
    variant keys.
    """
    payload = convert(
        Path(html_file).read_text(encoding="utf-8"),
        Path(css_file).read_text(encoding="utf-8"),
        id_prefix=prefix,
    )

    click.echo(f"Nodes:  {len(payload.nodes)}")
    click.echo(f"Styles: {len(payload.styles)}")
    click.echo()

    click.echo("Nodes:")
    for node in payload.nodes:
        if node.text:
            text = node.v or ""
            display = text[:40] + "..." if len(text) > 40 else text
            click.echo(f'    {node.id}  text="{display}"')
            continue
        parts = [f"  {node.id}", f"type={node.type.value if node.type else 'Block'}", f"tag={node.tag}"]
        if node.classes:
            parts.append(f"classes={'.'.join(node.classes)}")
        if node.children:
            parts.append(f"children={len(node.children)}")
        click.echo("  ".join(parts))
    click.echo()

    click.echo("Styles:")
    for style in payload.styles:
        parts = [f"  .{style.name}"]
        if style.comb:
            parts.append("combo")
        if style.variants:
            parts.append(f"variants={','.join(style.variants)}")
        click.echo("  ".join(parts))
