from __future__ import annotations

import logging

import requests
from github import Auth, Github, GithubException

from prcritic_core.errors import UpstreamUnavailable
from prcritic_core.models import ExistingComment, PullRequestRef

logger = logging.getLogger(__name__)

_DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"


def get_repo(repo_name: str, token: str | None, api_url: str = "https://api.github.com"):
    try:
        # retry=None disables PyGithub's default backoff on failed requests.
        gh = Github(auth=Auth.Token(token) if token else None, base_url=api_url, retry=None)
        return gh.get_repo(repo_name)
    except GithubException as e:
        raise UpstreamUnavailable(f"Could not open repository {repo_name}: {e}", status=e.status) from e


def get_pull(repo, pr_number: int):
    try:
        return repo.get_pull(pr_number)
    except GithubException as e:
        raise UpstreamUnavailable(f"PR #{pr_number} not found in {repo.full_name}.", status=e.status) from e


def get_pull_request_diff(pr_ref: PullRequestRef, token: str | None, api_url: str = "https://api.github.com") -> str:
    """Return the PR as unified-diff text.

    PyGithub only exposes the JSON representation of a pull request, so the
    diff is requested directly with the diff media type.
    """
    url = f"{api_url.rstrip('/')}/repos/{pr_ref.repo}/pulls/{pr_ref.number}"
    headers = {"Accept": _DIFF_MEDIA_TYPE}
    if token:
        headers["Authorization"] = f"token {token}"
    try:
        response = requests.get(url, headers=headers)
    except requests.RequestException as e:
        raise UpstreamUnavailable(f"Could not fetch diff for {pr_ref}: {e}") from e
    if not response.ok:
        raise UpstreamUnavailable(
            f"Could not fetch diff for {pr_ref}: {response.status_code} {response.reason}",
            status=response.status_code,
        )
    logger.debug("Fetched diff for %s (%d chars)", pr_ref, len(response.text))
    return response.text


def get_existing_comments(pr) -> list[ExistingComment]:
    """Return the line comments already on the PR, in API order."""
    try:
        raw_comments = list(pr.get_review_comments())
    except GithubException as e:
        raise UpstreamUnavailable(f"Could not list review comments: {e}", status=e.status) from e
    except requests.RequestException as e:
        raise UpstreamUnavailable(f"Could not list review comments: {e}") from e

    comments = []
    for c in raw_comments:
        # c.line is None for comments whose line no longer exists in the current diff
        # (e.g. after a force-push). Fall back to original_line in that case.
        line = c.line if c.line is not None else getattr(c, "original_line", None)
        comments.append(ExistingComment(path=c.path, line=line, body=c.body or ""))
    return comments


def get_latest_commit(pr):
    """Return the last commit on the PR, the one new comments are attached to."""
    try:
        commits = list(pr.get_commits())
    except GithubException as e:
        raise UpstreamUnavailable(f"Could not list PR commits: {e}", status=e.status) from e
    except requests.RequestException as e:
        raise UpstreamUnavailable(f"Could not list PR commits: {e}") from e
    if not commits:
        raise UpstreamUnavailable("PR has no commits to attach comments to.")
    return commits[-1]
