#!/usr/bin/env python3
"""
Developer CLI for tagclip.

Usage:
    tagclip tags                    - List tags in the workspace registry
    tagclip schema TAG              - Show a tag's resolved fields
    tagclip rank                    - Rank tags for capture-friendliness
    tagclip templates               - List built-in and user templates
    tagclip render --url URL ...    - Build the node for a capture
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from loguru import logger
from rich.console import Console
from rich.table import Table

from ..engine.capture import CaptureService
from ..engine.config import Config
from ..engine.errors import TagclipError
from ..engine.log import configure_logging
from ..engine.models import CaptureContent
from ..engine.paste import build_paste

console = Console()


@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Config file (YAML)")
@click.option("--workspace", "-w", help="Workspace name")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, config_path: Optional[Path], workspace: Optional[str], verbose: bool):
    """tagclip - file captures into your tag schemas."""
    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    if workspace:
        config.registry.workspace = workspace

    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = CaptureService(config)


@cli.command()
@click.pass_obj
def tags(service: CaptureService):
    """List tags in the registry."""
    schemas = service.store.list_tags()
    if not schemas:
        console.print(f"[yellow]No schema available at {service.store.snapshot_path}[/yellow]")
        return

    table = Table(title=f"Tags ({len(schemas)})")
    table.add_column("Name", style="cyan")
    table.add_column("Fields", justify="right")
    table.add_column("Extends")

    for schema in schemas:
        table.add_row(schema.name, str(len(schema.fields)), ", ".join(schema.extends))

    console.print(table)


@cli.command()
@click.argument("tag")
@click.option("--max-depth", type=int, help="Hide fields inherited from further up")
@click.pass_obj
def schema(service: CaptureService, tag: str, max_depth: Optional[int]):
    """Show a tag's resolved fields."""
    resolved = service.get_schema(tag)
    if resolved is None:
        console.print(f"[red]Tag not found:[/red] {tag}")
        sys.exit(1)

    fields = resolved.fields if max_depth is None else resolved.fields_within(max_depth)
    table = Table(title=f"#{resolved.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("From")
    table.add_column("Depth", justify="right")

    for f in fields:
        data_type = f.data_type or ""
        if f.target_tag:
            data_type += f" -> #{f.target_tag.name}"
        table.add_row(f.name, data_type, f.origin_tag_name, str(f.depth))

    console.print(table)


@cli.command()
@click.option("--min-score", type=int, help="Drop tags scoring below this")
@click.option("--limit", "-l", type=int, help="Max results")
@click.pass_obj
def rank(service: CaptureService, min_score: Optional[int], limit: Optional[int]):
    """Rank tags by how well they suit captured content."""
    ranked = service.suggest_tags(min_score=min_score, limit=limit)
    if not ranked:
        console.print("[yellow]No tags found[/yellow]")
        return

    table = Table(title="Capture-friendly tags")
    table.add_column("Tag", style="cyan")
    table.add_column("Score", justify="right", style="green")
    table.add_column("URL field")
    table.add_column("Text fields")

    for scored in ranked:
        table.add_row(
            scored.schema.name,
            str(scored.score),
            scored.url_field_name or "-",
            ", ".join(scored.text_fields) or "-",
        )

    console.print(table)


@cli.command()
@click.pass_obj
def templates(service: CaptureService):
    """List templates in match priority order."""
    table = Table(title="Templates")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Tag")
    table.add_column("Triggers")
    table.add_column("Problems", style="red")

    for template in service.engine.library.all():
        problems = service.engine.validate(template)
        table.add_row(
            template.id,
            template.name,
            template.target_tag_name,
            "\n".join(template.triggers),
            "\n".join(problems),
        )

    console.print(table)


@cli.command()
@click.option("--url", required=True, help="Source URL")
@click.option("--title", default="", help="Page title")
@click.option("--selection", help="Selected text")
@click.option("--author", help="Author")
@click.option("--description", help="Description")
@click.option("--tag", "-t", help="Target tag (overrides template)")
@click.option("--link", is_flag=True, default=None, help="Format URL as [title](url)")
@click.option("--no-templates", is_flag=True, help="Skip template matching")
@click.option("--paste", is_flag=True, help="Print paste outline instead of JSON")
@click.pass_obj
def render(
    service: CaptureService,
    url: str,
    title: str,
    selection: Optional[str],
    author: Optional[str],
    description: Optional[str],
    tag: Optional[str],
    link: Optional[bool],
    no_templates: bool,
    paste: bool
):
    """Build the node a capture would create."""
    content = CaptureContent(
        source_locator=url,
        title=title,
        selected_text=selection,
        author=author,
        description=description,
    )

    try:
        payload = service.build_node(
            content,
            tag_name=tag,
            format_url_as_link=link,
            use_templates=not no_templates,
        )
    except TagclipError as e:
        logger.error(f"Render failed: {e}")
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if paste:
        click.echo(build_paste(payload))
    else:
        click.echo(json.dumps(payload.to_dict(), indent=2, ensure_ascii=False))

    if payload.unmapped_fields:
        console.print(f"[yellow]Unmapped fields:[/yellow] {', '.join(payload.unmapped_fields)}")


if __name__ == "__main__":
    cli()
