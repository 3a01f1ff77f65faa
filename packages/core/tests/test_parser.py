"""Tests for decoding the model's answer into a ReviewSet."""

import json

import pytest

from prcritic_core.errors import MalformedReviewOutput
from prcritic_core.models import FileReview, LineReview, ReviewSet
from prcritic_core.parser import parse_review_set

VALID = json.dumps(
    {
        "files": [
            {
                "fileName": "app.ts",
                "reviews": [
                    {"lineNumber": 42, "reviewComment": "MUST: remove unused variable"},
                    {"lineNumber": 50, "reviewComment": "NITS: trailing comma"},
                ],
            },
            {"fileName": "lib/util.ts", "reviews": [{"lineNumber": 3, "reviewComment": "IMO: extract helper"}]},
        ]
    }
)


class TestParseValid:
    def test_parses_files_and_reviews_in_order(self):
        result = parse_review_set(VALID)
        assert [f.file_name for f in result.files] == ["app.ts", "lib/util.ts"]
        assert result.files[0].reviews == (
            LineReview(42, "MUST: remove unused variable"),
            LineReview(50, "NITS: trailing comma"),
        )
        assert result.total_reviews == 3

    def test_empty_files_means_no_issues(self):
        result = parse_review_set('{"files":[]}')
        assert result == ReviewSet()
        assert result.total_reviews == 0

    def test_strips_markdown_code_fences(self):
        result = parse_review_set(f"```json\n{VALID}\n```")
        assert result.total_reviews == 3

    def test_preserves_code_blocks_inside_comments(self):
        """Backticks inside comment values must not be stripped."""
        payload = json.dumps(
            {
                "files": [
                    {
                        "fileName": "a.py",
                        "reviews": [{"lineNumber": 5, "reviewComment": "IMO: use\n```python\nfoo()\n```"}],
                    }
                ]
            }
        )
        result = parse_review_set(f"```json\n{payload}\n```")
        assert "```python" in result.files[0].reviews[0].review_comment

    def test_quoted_line_number_accepted(self):
        raw = '{"files":[{"fileName":"a.py","reviews":[{"lineNumber":"12","reviewComment":"IMO: x"}]}]}'
        assert parse_review_set(raw).files[0].reviews[0].line_number == 12

    def test_file_with_no_reviews(self):
        raw = '{"files":[{"fileName":"a.py","reviews":[]}]}'
        assert parse_review_set(raw) == ReviewSet(files=(FileReview("a.py", ()),))


class TestParseMalformed:
    @pytest.mark.parametrize(
        "raw",
        [
            "not json at all",
            '{"files":[{"fileName":"a.py","reviews":[{"lineNumber":1,',  # truncated
            "[]",
            "{}",
            '{"files": {}}',
            '{"files":["a.py"]}',
            '{"files":[{"reviews":[]}]}',
            '{"files":[{"fileName":"a.py"}]}',
            '{"files":[{"fileName":"a.py","reviews":[{"reviewComment":"x"}]}]}',
            '{"files":[{"fileName":"a.py","reviews":[{"lineNumber":0,"reviewComment":"x"}]}]}',
            '{"files":[{"fileName":"a.py","reviews":[{"lineNumber":1.5,"reviewComment":"x"}]}]}',
            '{"files":[{"fileName":"a.py","reviews":[{"lineNumber":true,"reviewComment":"x"}]}]}',
            '{"files":[{"fileName":"a.py","reviews":[{"lineNumber":"²","reviewComment":"x"}]}]}',  # digit, not decimal
            '{"files":[{"fileName":"a.py","reviews":[{"lineNumber":1}]}]}',
        ],
    )
    def test_raises_malformed_review_output(self, raw):
        with pytest.raises(MalformedReviewOutput):
            parse_review_set(raw)

    def test_one_bad_entry_rejects_everything(self):
        raw = json.dumps(
            {
                "files": [
                    {"fileName": "a.py", "reviews": [{"lineNumber": 1, "reviewComment": "MUST: ok"}]},
                    {"fileName": "b.py", "reviews": [{"lineNumber": "two", "reviewComment": "MUST: bad"}]},
                ]
            }
        )
        with pytest.raises(MalformedReviewOutput, match=r"files\[1\]\.reviews\[0\]"):
            parse_review_set(raw)

    def test_raw_text_kept_on_error(self):
        with pytest.raises(MalformedReviewOutput) as excinfo:
            parse_review_set("oops")
        assert excinfo.value.raw == "oops"


class TestSeverity:
    @pytest.mark.parametrize(
        "comment,expected",
        [
            ("MUST: fix", "MUST"),
            ("IMO: maybe", "IMO"),
            ("NITS: style", "NITS"),
            ("  MUST : spaced", "MUST"),
            ("no label here", None),
            ("MUSTARD: not a label", None),
        ],
    )
    def test_severity_from_prefix(self, comment, expected):
        assert LineReview(1, comment).severity == expected
