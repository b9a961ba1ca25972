"""Claude API gateway.

Claude has no response-schema switch, so the schema is appended to the
prompt and the reply goes through the same strict parser as Gemini's.
"""

from __future__ import annotations

import json

from . import AIGateway, EncodedImage


def _with_schema(prompt: str, schema: dict) -> str:
    return (
        f"{prompt}\n\n"
        "Reply with JSON only (no other text), matching this schema:\n"
        f"{json.dumps(schema, indent=2)}"
    )


class ClaudeGateway(AIGateway):
    """Recognize ingredients and suggest recipes with Claude."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 4096,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens

    def _ensure_configured(self) -> None:
        if not self._api_key:
            raise ValueError(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

    async def _create(self, content: list[dict]) -> str | None:
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=self._max_tokens,
            messages=[{"role": "user", "content": content}],
        )
        if not response.content:
            return None
        return response.content[0].text

    async def _generate_from_image(
        self, image: EncodedImage, prompt: str, schema: dict
    ) -> str | None:
        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image.mime_type,
                    "data": image.data,
                },
            },
            {"type": "text", "text": _with_schema(prompt, schema)},
        ]
        return await self._create(content)

    async def _generate_from_text(self, prompt: str, schema: dict) -> str | None:
        return await self._create(
            [{"type": "text", "text": _with_schema(prompt, schema)}]
        )
