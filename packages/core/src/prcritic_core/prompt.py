"""Prompt construction for a whole-PR review request."""

from __future__ import annotations

from typing import Iterable

from prcritic_core.models import ExistingComment

RESPONSE_FORMAT = (
    '{"files":[{"fileName":"<file_name>","reviews": '
    '[{"lineNumber":<line_number>,"reviewComment":"<review comment>"}]}]}'
)
EMPTY_RESPONSE = '{"files":[]}'


def build_dedup_clause(existing_comments: Iterable[ExistingComment]) -> str:
    """Render the 'do not repeat these' clause, or "" when there is nothing to list."""
    comments = list(existing_comments)
    if not comments:
        return ""
    lines = ["- However, please ensure the content does not duplicate the following existing comments:"]
    for c in comments:
        lines.append(f'  - file "{c.path}", line {c.line}: {c.body}')
    return "\n".join(lines) + "\n"


def build_prompt(
    diff: str,
    existing_comments: Iterable[ExistingComment] = (),
    language: str = "Japanese",
) -> str:
    """Compose the single user message sent to the model.

    The diff is embedded as-is; oversized diffs are left for the model service
    to truncate or reject.
    """
    prompt = (
        f"Review the following code:\n\n{diff}\n\n"
        "- Be sure to comment on areas for improvement.\n"
        f"- Please make review comments in {language}.\n"
        '- Please prefix your review comments with one of the following labels "MUST:","IMO:","NITS:".\n'
        "  - MUST: must be modified\n"
        "  - IMO: personal opinion or minor proposal\n"
        "  - NITS: Proposals that do not require modification\n"
        "- The following json format should be followed.\n"
        f"{RESPONSE_FORMAT}\n"
        f"- If there is no review comment, please answer {EMPTY_RESPONSE}\n"
    )
    return prompt + build_dedup_clause(existing_comments)
