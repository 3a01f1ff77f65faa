"""Tests for GitHub pull request helper functions."""

import types
from unittest.mock import MagicMock

import pytest
import requests
from github import GithubException

from prcritic_core.errors import UpstreamUnavailable
from prcritic_core.gh.pull_request import (
    get_existing_comments,
    get_latest_commit,
    get_pull,
    get_pull_request_diff,
    get_repo,
)
from prcritic_core.models import ExistingComment, PullRequestRef

PR_REF = PullRequestRef(repo="owner/repo", number=7)


def _response(status=200, text="", reason="OK"):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text
    resp.reason = reason
    return resp


def _comment(path, line, body, original_line=None):
    return types.SimpleNamespace(path=path, line=line, original_line=original_line, body=body)


class TestGetPullRequestDiff:
    def test_requests_diff_media_type(self, mocker):
        get = mocker.patch("prcritic_core.gh.pull_request.requests.get", return_value=_response(text="diff --git"))

        result = get_pull_request_diff(PR_REF, "tok")

        assert result == "diff --git"
        url = get.call_args.args[0]
        headers = get.call_args.kwargs["headers"]
        assert url == "https://api.github.com/repos/owner/repo/pulls/7"
        assert headers["Accept"] == "application/vnd.github.v3.diff"
        assert headers["Authorization"] == "token tok"

    def test_custom_api_url(self, mocker):
        get = mocker.patch("prcritic_core.gh.pull_request.requests.get", return_value=_response(text=""))
        get_pull_request_diff(PR_REF, "tok", api_url="https://ghe.example.com/api/v3/")
        assert get.call_args.args[0] == "https://ghe.example.com/api/v3/repos/owner/repo/pulls/7"

    def test_non_success_status_raises(self, mocker):
        mocker.patch(
            "prcritic_core.gh.pull_request.requests.get",
            return_value=_response(status=404, reason="Not Found"),
        )
        with pytest.raises(UpstreamUnavailable) as excinfo:
            get_pull_request_diff(PR_REF, "tok")
        assert excinfo.value.status == 404

    def test_transport_error_raises(self, mocker):
        mocker.patch(
            "prcritic_core.gh.pull_request.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        )
        with pytest.raises(UpstreamUnavailable):
            get_pull_request_diff(PR_REF, "tok")


class TestGetExistingComments:
    def test_returns_empty_list_when_no_comments(self):
        pr = MagicMock()
        pr.get_review_comments.return_value = []
        assert get_existing_comments(pr) == []

    def test_prefers_current_line(self):
        pr = MagicMock()
        pr.get_review_comments.return_value = [_comment("a.py", 10, "fix this", original_line=8)]
        assert get_existing_comments(pr) == [ExistingComment(path="a.py", line=10, body="fix this")]

    def test_falls_back_to_original_line(self):
        """Comments whose line is None (after force-push) resolve via original_line."""
        pr = MagicMock()
        pr.get_review_comments.return_value = [_comment("a.py", None, "stale", original_line=4)]
        assert get_existing_comments(pr)[0].line == 4

    def test_keeps_api_order(self):
        pr = MagicMock()
        pr.get_review_comments.return_value = [_comment("b.py", 1, "one"), _comment("a.py", 2, "two")]
        assert [c.path for c in get_existing_comments(pr)] == ["b.py", "a.py"]

    def test_none_body_becomes_empty_string(self):
        pr = MagicMock()
        pr.get_review_comments.return_value = [_comment("a.py", 1, None)]
        assert get_existing_comments(pr)[0].body == ""

    def test_api_failure_raises(self):
        pr = MagicMock()
        pr.get_review_comments.side_effect = GithubException(500, {"message": "boom"})
        with pytest.raises(UpstreamUnavailable) as excinfo:
            get_existing_comments(pr)
        assert excinfo.value.status == 500


class TestGetLatestCommit:
    def test_returns_last_commit(self):
        first, last = MagicMock(sha="a" * 40), MagicMock(sha="b" * 40)
        pr = MagicMock()
        pr.get_commits.return_value = [first, last]
        assert get_latest_commit(pr) is last

    def test_empty_commit_list_raises(self):
        pr = MagicMock()
        pr.get_commits.return_value = []
        with pytest.raises(UpstreamUnavailable):
            get_latest_commit(pr)

    def test_api_failure_raises(self):
        pr = MagicMock()
        pr.get_commits.side_effect = GithubException(403, {"message": "Forbidden"})
        with pytest.raises(UpstreamUnavailable):
            get_latest_commit(pr)


class TestGetPull:
    def test_missing_pr_raises_upstream_unavailable(self):
        repo = MagicMock()
        repo.full_name = "owner/repo"
        repo.get_pull.side_effect = GithubException(404, {"message": "Not Found"})
        with pytest.raises(UpstreamUnavailable, match="PR #0 not found"):
            get_pull(repo, 0)


class TestGetRepo:
    def test_client_built_without_retries(self, mocker):
        mock_github = mocker.patch("prcritic_core.gh.pull_request.Github")
        get_repo("owner/repo", token="tok", api_url="https://ghe.example.com/api/v3")
        kwargs = mock_github.call_args.kwargs
        assert kwargs["retry"] is None
        assert kwargs["base_url"] == "https://ghe.example.com/api/v3"
        mock_github.return_value.get_repo.assert_called_once_with("owner/repo")

    def test_missing_repo_raises_upstream_unavailable(self, mocker):
        mock_github = mocker.patch("prcritic_core.gh.pull_request.Github")
        mock_github.return_value.get_repo.side_effect = GithubException(404, {"message": "Not Found"})
        with pytest.raises(UpstreamUnavailable) as excinfo:
            get_repo("owner/missing", token="tok")
        assert excinfo.value.status == 404
