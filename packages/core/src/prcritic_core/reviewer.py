"""Core PR review orchestration."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from prcritic_core.config import ReviewConfig
from prcritic_core.gh.pull_request import get_existing_comments, get_pull, get_pull_request_diff, get_repo
from prcritic_core.models import PublishReport, ReviewOutcome, ReviewSet
from prcritic_core.parser import parse_review_set
from prcritic_core.prompt import build_prompt
from prcritic_core.providers.anthropic import AnthropicReviewer
from prcritic_core.providers.base import BaseReviewer
from prcritic_core.providers.openai import OpenAIReviewer
from prcritic_core.publisher import publish_reviews
from prcritic_core.utils.diff import parse_unified_diff

console = Console()
logger = logging.getLogger(__name__)

_SEVERITY_COLOR = {"MUST": "red", "IMO": "yellow", "NITS": "dim"}


def _get_reviewer(config: ReviewConfig) -> BaseReviewer:
    model = config.model
    if model == "openai":
        return OpenAIReviewer(api_key=config.openai_api_key)
    if model == "anthropic":
        return AnthropicReviewer(api_key=config.anthropic_api_key)
    raise ValueError(f"Unknown model provider: {model!r}. Choose 'openai' or 'anthropic'.")


def print_shadow_comments(review_set: ReviewSet) -> None:
    """Print review comments to the terminal without posting to GitHub."""
    total = review_set.total_reviews
    if not total:
        console.print("[yellow]Shadow mode: no comments generated.[/yellow]")
        return
    console.print(f"\n[bold]Shadow review: {total} comment(s) (not posted)[/bold]\n")
    for file_review in review_set.files:
        for review in file_review.reviews:
            severity = review.severity or "-"
            color = _SEVERITY_COLOR.get(severity, "white")
            console.print(
                f"[bold cyan]{escape(file_review.file_name)}[/bold cyan]  line [bold]{review.line_number}[/bold]  "
                f"[{color}]{severity}[/{color}]"
            )
            console.print(f"  {escape(review.review_comment)}")
            console.print()


def print_publish_report(report: PublishReport) -> None:
    if not report.rejected:
        console.print(f"\n[green]Posted {len(report.posted)} comment(s).[/green]")
        return
    console.print(
        f"\n[yellow]Posted {len(report.posted)} of {report.attempted} comment(s); "
        f"{len(report.rejected)} rejected.[/yellow]"
    )
    for rejected in report.rejected:
        console.print(f"  [dim]{escape(str(rejected))}[/dim]")


def run_review(config: ReviewConfig, reviewer: BaseReviewer | None = None, pr_obj=None) -> ReviewOutcome:
    """Run the full pipeline for the configured PR.

    fetch diff → build prompt (with existing comments) → ask the model
    → parse → publish. Every step before publishing fails fast, so nothing
    is posted unless the model's answer parsed cleanly.
    """
    pr_ref = config.pr_ref
    if pr_obj is None:
        this_repo = get_repo(pr_ref.repo, token=config.github_token, api_url=config.api_url)
        pr_obj = get_pull(this_repo, pr_ref.number)

    console.print(f"Reviewing [bold]{pr_ref}[/bold]")
    diff = get_pull_request_diff(pr_ref, token=config.github_token, api_url=config.api_url)
    existing_comments = get_existing_comments(pr_obj)
    logger.info("%s: %d-char diff, %d existing comment(s)", pr_ref, len(diff), len(existing_comments))

    prompt = build_prompt(diff, existing_comments, language=config.language)

    reviewer = reviewer if reviewer is not None else _get_reviewer(config)
    raw = reviewer.request(prompt)
    if raw is None:
        console.print("[yellow]The model returned no content. Nothing to post.[/yellow]")
        return ReviewOutcome(pr=pr_ref, status="no_content")

    review_set = parse_review_set(raw)
    console.print(f"  {review_set.total_reviews} comment(s) across {len(review_set.files)} file(s).")

    if config.shadow:
        print_shadow_comments(review_set)
        return ReviewOutcome(pr=pr_ref, status="shadow", review_set=review_set)

    diff_index = parse_unified_diff(diff) if config.validate_lines else None
    report = publish_reviews(pr_obj, review_set, diff_index)
    print_publish_report(report)
    return ReviewOutcome(pr=pr_ref, status="published", review_set=review_set, report=report)
