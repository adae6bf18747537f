"""Conversion pipeline: export text → parsing → CSV tables."""

from __future__ import annotations

import logging

import click

from .config import Settings
from .parser import parse_export
from .writer import TableWriter

logger = logging.getLogger(__name__)


def convert_export(settings: Settings) -> dict:
    """Convert the export named by settings.input into per-conversation tables.

    Returns a summary dict with conversion statistics.
    """
    input_file = settings.input

    if not input_file.is_file():
        raise click.ClickException(f"File not found: {input_file}")

    click.echo(f"Parsing {input_file}...")
    conversations = parse_export(input_file, multi_line=settings.multi_lines)
    click.echo(f"Found {len(conversations)} conversations in export.")

    writer = TableWriter(settings)
    writer.prepare()

    written = 0
    skipped = 0
    total_messages = 0

    with click.progressbar(
        conversations,
        label="Writing tables",
        show_pos=True,
    ) as progress:
        for conv in progress:
            if not writer.should_write(conv):
                logger.debug("Skipping %s-%s", conv.group, conv.name)
                skipped += 1
                continue

            writer.write_conversation(conv)
            written += 1
            total_messages += conv.message_count

    summary = {
        "conversations": len(conversations),
        "written": written,
        "skipped": skipped,
        "messages": total_messages,
    }

    click.echo()
    click.echo(click.style("Conversion complete!", fg="green", bold=True))
    click.echo(f"  Written:  {written} tables ({total_messages} messages)")
    if skipped:
        click.echo(f"  Skipped:  {skipped} (recent contacts)")
    click.echo(f"  Location: {writer.output_dir.resolve()}")

    return summary
