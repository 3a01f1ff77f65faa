from __future__ import annotations

try:
    from openai import OpenAI as _OpenAI
except ImportError:
    _OpenAI = None  # type: ignore[assignment,misc]

from prcritic_core.providers.base import BaseReviewer


class OpenAIReviewer(BaseReviewer):
    MODEL = "gpt-4o"

    def __init__(self, api_key: str):
        if _OpenAI is None:
            raise ImportError("The 'openai' package is required for this provider. Install it with: pip install prcritic")
        # One request per run: the SDK's built-in retries are switched off.
        self.client = _OpenAI(api_key=api_key, max_retries=0)

    def _call_api(self, prompt: str) -> str | None:
        response = self.client.chat.completions.create(
            model=self.MODEL,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.choices:
            return None
        return response.choices[0].message.content
