"""Post a ReviewSet onto a pull request, one inline comment at a time."""

from __future__ import annotations

import logging

import requests
from github import GithubException

from prcritic_core.errors import CommentRejected
from prcritic_core.gh.pull_request import get_latest_commit
from prcritic_core.models import PublishedComment, PublishReport, ReviewSet
from prcritic_core.utils.diff import DiffIndex

logger = logging.getLogger(__name__)


def _error_details(exc: Exception):
    """Return GitHub's whole error body (message plus the errors list), whatever its shape."""
    data = getattr(exc, "data", None)
    if isinstance(data, dict):
        return {"message": data.get("message"), "errors": data.get("errors", [])}
    return data if data is not None else str(exc)


def publish_reviews(pr, review_set: ReviewSet, diff_index: DiffIndex | None = None) -> PublishReport:
    """Post every LineReview in file-then-review order against the PR's latest commit.

    A rejected comment is logged and recorded in the report; it never stops the
    rest of the batch. When diff_index is given, lines outside the diff are
    rejected locally instead of being sent to GitHub.

    Raises UpstreamUnavailable only if the latest commit cannot be resolved.
    """
    commit = get_latest_commit(pr)
    report = PublishReport()

    for file_review in review_set.files:
        for review in file_review.reviews:
            comment = PublishedComment(
                body=review.review_comment,
                commit_id=commit.sha,
                path=file_review.file_name,
                line=review.line_number,
            )

            if diff_index is not None and not diff_index.is_addressable(comment.path, comment.line):
                rejected = CommentRejected(comment, reason="line not in diff")
                logger.warning("Comment rejected before posting: %s payload=%s", rejected, comment.to_payload())
                report.rejected.append(rejected)
                continue

            try:
                pr.create_review_comment(
                    body=comment.body,
                    commit=commit,
                    path=comment.path,
                    line=comment.line,
                    side="RIGHT",
                )
            except (GithubException, requests.RequestException) as e:
                status = getattr(e, "status", None)
                details = _error_details(e)
                report.rejected.append(
                    CommentRejected(comment, status=status, reason="GitHub refused the comment", details=details)
                )
                logger.warning(
                    "Error posting comment: status=%s payload=%s error=%s",
                    status,
                    comment.to_payload(),
                    details,
                )
                continue

            logger.debug("Posted comment on %s:%d", comment.path, comment.line)
            report.posted.append(comment)

    return report
