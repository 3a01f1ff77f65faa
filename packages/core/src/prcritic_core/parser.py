"""Decode the model's raw answer into a ReviewSet.

The shape is checked in full before anything is returned: a response that is
only partly valid is rejected as a whole, so nothing gets posted from it.
"""

from __future__ import annotations

import json
import logging
import re

from prcritic_core.errors import MalformedReviewOutput
from prcritic_core.models import FileReview, LineReview, ReviewSet

logger = logging.getLogger(__name__)


def _strip_fence(raw: str) -> str:
    # Strip only the outer ```json ... ``` fence that the model wraps
    # the response in, NOT backticks inside comment string values.
    cleaned = re.sub(r"^```(?:json)?\s*", "", raw.strip())
    return re.sub(r"\s*```$", "", cleaned.strip())


def _line_number(value, where: str, raw: str) -> int:
    # bool is an int subclass; true/false are never line numbers.
    if isinstance(value, bool):
        value = None
    elif isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if not isinstance(value, int) or value < 1:
        raise MalformedReviewOutput(f"{where}: lineNumber must be a positive integer, got {value!r}", raw)
    return value


def _parse_review(entry, where: str, raw: str) -> LineReview:
    if not isinstance(entry, dict):
        raise MalformedReviewOutput(f"{where}: expected an object", raw)
    comment = entry.get("reviewComment")
    if not isinstance(comment, str):
        raise MalformedReviewOutput(f"{where}: reviewComment must be a string", raw)
    return LineReview(line_number=_line_number(entry.get("lineNumber"), where, raw), review_comment=comment)


def _parse_file(entry, where: str, raw: str) -> FileReview:
    if not isinstance(entry, dict):
        raise MalformedReviewOutput(f"{where}: expected an object", raw)
    file_name = entry.get("fileName")
    if not isinstance(file_name, str) or not file_name:
        raise MalformedReviewOutput(f"{where}: fileName must be a non-empty string", raw)
    reviews = entry.get("reviews")
    if not isinstance(reviews, list):
        raise MalformedReviewOutput(f"{where}: reviews must be a list", raw)
    return FileReview(
        file_name=file_name,
        reviews=tuple(_parse_review(r, f"{where}.reviews[{i}]", raw) for i, r in enumerate(reviews)),
    )


def parse_review_set(raw: str) -> ReviewSet:
    try:
        data = json.loads(_strip_fence(raw))
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse model response as JSON: %s", raw[:200])
        raise MalformedReviewOutput(f"Model response is not valid JSON: {e}", raw) from e

    if not isinstance(data, dict) or not isinstance(data.get("files"), list):
        raise MalformedReviewOutput('Model response must be an object with a "files" list', raw)

    return ReviewSet(files=tuple(_parse_file(f, f"files[{i}]", raw) for i, f in enumerate(data["files"])))
