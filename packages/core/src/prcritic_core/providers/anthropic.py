from __future__ import annotations

from prcritic_core.providers.base import BaseReviewer


class AnthropicReviewer(BaseReviewer):
    MODEL = "claude-sonnet-4-20250514"

    def __init__(self, api_key: str):
        try:
            from anthropic import Anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for this provider. "
                "Install it with: pip install 'prcritic[anthropic]'"
            )
        self.client = Anthropic(api_key=api_key, max_retries=0)

    def _call_api(self, prompt: str) -> str | None:
        # Imported inside the method because the anthropic package is optional;
        # __init__ already validated it is installed before we reach here.
        from anthropic.types import TextBlock

        response = self.client.messages.create(
            model=self.MODEL,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.MAX_TOKENS,
        )
        text_blocks = [block.text for block in response.content if isinstance(block, TextBlock)]
        return "".join(text_blocks).strip() or None
