"""CLI interface for qqchat2table."""

from __future__ import annotations

import logging
import sys
import traceback

import click

from . import __version__
from .config import CONFIG_FILE_NAME, load_settings

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="qqchat2table")
@click.option("-v", "--verbose", count=True, help="Show parser progress (-vv for debug output)")
@click.pass_context
def cli(ctx: click.Context, verbose: int):
    """qqchat2table — Split a QQ chat-history export into CSV tables.

    Reads the "全部消息记录.txt" export written by QQ's message manager and
    writes one CSV file per contact or group chat. Settings come from
    config.txt in the working directory; run without a command to convert
    using those settings.
    """
    logging.basicConfig(
        level=LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)],
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if ctx.invoked_subcommand is None:
        ctx.invoke(convert)


@cli.command()
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False), default=CONFIG_FILE_NAME,
    show_default=True, help="Settings file with Key=value lines",
)
@click.option("--input", "input_path", type=click.Path(dir_okay=False), help="Chat export text file")
@click.option("--output-dir", type=click.Path(file_okay=False), help="Directory for the CSV tables (recreated on each run)")
@click.option("--file-name", help="Output file name template using {Group} and {Name}")
@click.option("--ignore-empty/--keep-empty", default=None, help="Drop messages with no content")
@click.option("--ignore-recent/--keep-recent", default=None, help="Skip the recent contacts list")
@click.option("--multi-lines/--single-line", default=None, help="Keep line breaks inside messages")
@click.option("--open/--no-open", "open_output", default=True, help="Open the output directory when done")
@click.option("--pause/--no-pause", default=True, help="Wait for a key press after an error")
@click.pass_context
def convert(
    ctx: click.Context,
    config_path: str,
    input_path: str | None,
    output_dir: str | None,
    file_name: str | None,
    ignore_empty: bool | None,
    ignore_recent: bool | None,
    multi_lines: bool | None,
    open_output: bool,
    pause: bool,
):
    """Convert the chat export into one CSV table per conversation.

    Command-line options override the values from the settings file.

    Example:
        qqchat2table convert --input 全部消息记录.txt --output-dir tables
    """
    from .converter import convert_export

    try:
        settings = load_settings(config_path).with_overrides(
            input=input_path,
            output_dir=output_dir,
            output_file_name=file_name,
            ignore_empty=ignore_empty,
            ignore_recent=ignore_recent,
            multi_lines=multi_lines,
        )
        convert_export(settings)
    except Exception as exc:
        click.echo(click.style("Conversion failed", fg="red", bold=True), err=True)
        click.echo("".join(traceback.format_exception(exc)), err=True)
        if pause:
            click.pause("Press any key to exit...", err=True)
        ctx.exit(1)

    if open_output:
        click.launch(str(settings.output_dir.resolve()))


@cli.command()
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False), default=CONFIG_FILE_NAME,
    show_default=True, help="Settings file with Key=value lines",
)
def config(config_path: str):
    """Print the effective settings in config file syntax."""
    settings = load_settings(config_path)
    for line in settings.to_lines():
        click.echo(line)
