"""CLI entry point for prcritic.

Commands:
  review   run AI review on a pull request and post inline comments
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prcritic_cli.commands.review import review_cmd

console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # PyGithub and urllib3 are chatty at DEBUG; keep them at WARNING regardless.
    for noisy in ("github", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("prcritic"),
    prog_name="prcritic",
)
@click.option(
    "--config",
    "config_path",
    default=".prcritic.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRCRITIC_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """AI-powered GitHub PR code reviewer."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(review_cmd)
