"""Error taxonomy for the review pipeline.

Everything upstream of publishing is fail-fast: ConfigError, UpstreamUnavailable,
ModelUnavailable and MalformedReviewOutput abort the run before anything is posted.
CommentRejected is the one recoverable failure; the publisher collects it per
comment and keeps going.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from prcritic_core.models import PublishedComment


class ReviewError(Exception):
    """Base class for every failure raised by prcritic_core."""


class ConfigError(ReviewError):
    """A configuration value is present but unusable."""


class UpstreamUnavailable(ReviewError):
    """The GitHub API could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ModelUnavailable(ReviewError):
    """The language-model completion call failed."""


class MalformedReviewOutput(ReviewError):
    """The model answered, but not with the JSON shape the prompt asked for."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class CommentRejected(ReviewError):
    """A single inline comment could not be posted.

    Never raised out of the publisher; instances are collected in
    PublishReport.rejected so the rest of the batch is still attempted.
    """

    def __init__(
        self,
        comment: PublishedComment,
        status: int | None = None,
        reason: str = "",
        details: Any = None,
    ):
        super().__init__(f"{comment.path}:{comment.line} rejected ({status or 'n/a'}): {reason}")
        self.comment = comment
        self.status = status
        self.reason = reason
        self.details = details
