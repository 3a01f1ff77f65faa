"""review command: run AI review on a pull request."""

from __future__ import annotations

import logging

import click

from prcritic_core.config import MODEL_PROVIDERS, load_config
from prcritic_core.errors import ConfigError, ReviewError
from prcritic_core.reviewer import run_review

logger = logging.getLogger(__name__)


@click.command("review")
@click.option("--repo", default=None, envvar="REPOSITORY", help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, default=None, envvar="PR_NUMBER", help="Pull request number.")
@click.option(
    "--model",
    type=click.Choice(MODEL_PROVIDERS),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.option("--language", default=None, help="Natural language the review comments are written in.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print review comments without posting to GitHub.",
)
@click.option(
    "--no-validate-lines",
    "no_validate_lines",
    is_flag=True,
    help="Send every comment to GitHub even if its line is outside the diff.",
)
@click.pass_context
def review_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    model: str | None,
    language: str | None,
    shadow: bool,
    no_validate_lines: bool,
):
    """Review a pull request with an LLM and post the findings as inline comments.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token used for reading the PR and posting comments
      OPENAI_API_KEY       Required when using --model openai (the default)
      ANTHROPIC_API_KEY    Required when using --model anthropic
    """
    config_path = (ctx.obj or {}).get("config_path", ".prcritic.yml")
    try:
        config = load_config(
            config_path,
            cli_overrides={
                "repository": repo,
                "pr_number": pr_number,
                "model": model,
                "language": language,
                "shadow": shadow or None,
                "validate_lines": False if no_validate_lines else None,
            },
        )
    except ConfigError as e:
        raise click.UsageError(str(e))

    if not config.repository:
        raise click.UsageError("No repository given. Pass --repo owner/name or set REPOSITORY.")
    if not config.github_token:
        raise click.UsageError("GITHUB_TOKEN environment variable is not set.")
    if config.model == "openai" and not config.openai_api_key:
        raise click.UsageError("OPENAI_API_KEY environment variable is not set.")
    if config.model == "anthropic" and not config.anthropic_api_key:
        raise click.UsageError("ANTHROPIC_API_KEY environment variable is not set.")

    try:
        run_review(config)
    except ReviewError as e:
        logger.error("Review of %s failed: %s", config.pr_ref, e, exc_info=logger.isEnabledFor(logging.DEBUG))
        ctx.exit(1)
