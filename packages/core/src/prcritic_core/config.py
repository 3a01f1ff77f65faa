import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

import yaml

from prcritic_core.errors import ConfigError
from prcritic_core.models import PullRequestRef

DEFAULT_CONFIG: dict = {
    "model": "openai",
    "language": "Japanese",
    "validate_lines": True,  # reject comments on lines outside the diff before posting
    "shadow": False,
    "api_url": "https://api.github.com",
}

MODEL_PROVIDERS = ("openai", "anthropic")

# environment variable -> config key
_ENV_KEYS = {
    "GITHUB_TOKEN": "github_token",
    "OPENAI_API_KEY": "openai_api_key",
    "ANTHROPIC_API_KEY": "anthropic_api_key",
    "REPOSITORY": "repository",
    "PR_NUMBER": "pr_number",
}


@dataclass(frozen=True)
class ReviewConfig:
    """Process-wide settings, built once at entry and passed to every stage."""

    repository: str = ""
    pr_number: int = 0
    github_token: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    model: str = DEFAULT_CONFIG["model"]
    language: str = DEFAULT_CONFIG["language"]
    validate_lines: bool = DEFAULT_CONFIG["validate_lines"]
    shadow: bool = DEFAULT_CONFIG["shadow"]
    api_url: str = DEFAULT_CONFIG["api_url"]

    @property
    def pr_ref(self) -> PullRequestRef:
        return PullRequestRef(repo=self.repository, number=self.pr_number)


def _parse_pr_number(value) -> int:
    # An unset PR number falls through as 0; GitHub answers that with a 404 later.
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"PR number must be an integer, got {value!r}")


def load_config(
    config_path: str = ".prcritic.yml",
    cli_overrides: Optional[dict] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ReviewConfig:
    """
    Build a ReviewConfig by merging (in order of precedence):
      1. Built-in defaults
      2. .prcritic.yml in the current directory
      3. Environment variables (credentials, REPOSITORY, PR_NUMBER)
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    env = os.environ if environ is None else environ
    for env_key, key in _ENV_KEYS.items():
        value = env.get(env_key)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["pr_number"] = _parse_pr_number(config.get("pr_number"))

    known = {f.name for f in fields(ReviewConfig)}
    unknown = sorted(set(config) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")
    if config["model"] not in MODEL_PROVIDERS:
        raise ConfigError(f"Unknown model provider: {config['model']!r}. Choose one of: {', '.join(MODEL_PROVIDERS)}")

    return ReviewConfig(**config)
