"""Gemini API gateway using schema-constrained JSON output."""

from __future__ import annotations

from . import AIGateway, EncodedImage


class GeminiGateway(AIGateway):
    """Recognize ingredients and suggest recipes with Google Gemini."""

    def __init__(
        self, api_key: str = "", model: str = "gemini-2.0-flash", **kwargs
    ) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._model = model

    def _ensure_configured(self) -> None:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

    def _get_model(self, schema: dict):
        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        return genai.GenerativeModel(
            self._model,
            generation_config=genai.GenerationConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )

    async def _generate_from_image(
        self, image: EncodedImage, prompt: str, schema: dict
    ) -> str | None:
        model = self._get_model(schema)
        parts = [
            {"mime_type": image.mime_type, "data": image.to_bytes()},
            prompt,
        ]
        response = await model.generate_content_async(parts)
        return response.text

    async def _generate_from_text(self, prompt: str, schema: dict) -> str | None:
        model = self._get_model(schema)
        response = await model.generate_content_async(prompt)
        return response.text
