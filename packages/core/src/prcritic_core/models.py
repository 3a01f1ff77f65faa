"""Records passed between pipeline stages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prcritic_core.errors import CommentRejected

SEVERITY_LABELS = ("MUST", "IMO", "NITS")

_SEVERITY_RE = re.compile(r"^\s*(MUST|IMO|NITS)\s*:")


@dataclass(frozen=True)
class PullRequestRef:
    repo: str  # "owner/name"
    number: int

    def __str__(self) -> str:
        return f"{self.repo}#{self.number}"


@dataclass(frozen=True)
class ExistingComment:
    path: str
    line: int | None
    body: str


@dataclass(frozen=True)
class LineReview:
    line_number: int
    review_comment: str

    @property
    def severity(self) -> str | None:
        """Label the model prefixed the comment with, or None if it did not comply."""
        match = _SEVERITY_RE.match(self.review_comment)
        return match.group(1) if match else None


@dataclass(frozen=True)
class FileReview:
    file_name: str
    reviews: tuple[LineReview, ...] = ()


@dataclass(frozen=True)
class ReviewSet:
    files: tuple[FileReview, ...] = ()

    @property
    def total_reviews(self) -> int:
        return sum(len(f.reviews) for f in self.files)


@dataclass(frozen=True)
class PublishedComment:
    """Payload for one inline comment, addressed by absolute line on the new file."""

    body: str
    commit_id: str
    path: str
    line: int

    def to_payload(self) -> dict:
        return {
            "body": self.body,
            "commit_id": self.commit_id,
            "path": self.path,
            "line": self.line,
            "side": "RIGHT",
        }


@dataclass
class PublishReport:
    posted: list[PublishedComment] = field(default_factory=list)
    rejected: list[CommentRejected] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.posted) + len(self.rejected)


@dataclass
class ReviewOutcome:
    """What run_review did; carries enough for the CLI to report on the run."""

    pr: PullRequestRef
    status: str  # "published" | "no_content" | "shadow"
    review_set: ReviewSet | None = None
    report: PublishReport | None = None
