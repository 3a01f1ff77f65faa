"""Base reviewer implementing the Template Method pattern.

All providers share the same request algorithm:
    request() → _call_api()   ← only this differs per provider
              → normalise empty content to None

Subclasses implement two things only:
  - __init__: validate and store the SDK client
  - _call_api: make one raw API call and return the text response

A failed call is not retried; it surfaces as ModelUnavailable and ends the run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from prcritic_core.errors import ModelUnavailable

logger = logging.getLogger(__name__)

_MAX_TOKENS = 4096


class BaseReviewer(ABC):
    MODEL: str = ""
    MAX_TOKENS: int = _MAX_TOKENS

    def request(self, prompt: str) -> str | None:
        """Send the prompt as a single user message and return the completion text.

        Returns None when the service answers without any content.
        """
        logger.debug("%s: sending %d-char prompt to %s", self.__class__.__name__, len(prompt), self.MODEL)
        try:
            raw = self._call_api(prompt)
        except Exception as e:
            raise ModelUnavailable(f"{self.__class__.__name__} API call failed: {e}") from e
        if not raw or not raw.strip():
            return None
        return raw

    @abstractmethod
    def _call_api(self, prompt: str) -> str | None:
        """Make a single API call and return the raw text response.

        This is the only method subclasses must implement. It should raise
        on failure; request() wraps the error in ModelUnavailable.
        """
