"""Google Gemini implementation of the gateway provider."""

from __future__ import annotations

import importlib
from typing import Any, Optional, Sequence

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger("services.gemini")


def _load_sdk() -> tuple[Any, Any]:
    """Import the google-genai SDK on first use."""

    try:
        genai = importlib.import_module("google.genai")
        types = importlib.import_module("google.genai.types")
    except ImportError as exc:
        raise ImportError(
            "The Gemini provider requires google-genai. "
            "Install with: pip install google-genai or use the 'ai' extra."
        ) from exc
    return genai, types


class GeminiProvider:
    """Sends insight and receipt prompts to a Gemini model, returning raw JSON text."""

    def __init__(self, *, api_key: str, model: str, client: Any = None) -> None:
        genai, self._types = _load_sdk()
        self.model = model
        self._client = client or genai.Client(api_key=api_key)

    def generate_insights(self, prompt: str) -> Optional[str]:
        response = self._client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self._types.GenerateContentConfig(response_mime_type="application/json"),
        )
        return response.text

    def extract_receipt(
        self,
        image_bytes: bytes,
        mime_type: str,
        prompt: str,
        categories: Sequence[str],
    ) -> Optional[str]:
        types = self._types
        schema = types.Schema(
            type=types.Type.OBJECT,
            properties={
                "amount": types.Schema(
                    type=types.Type.NUMBER, description="The total amount of the receipt"
                ),
                "merchant": types.Schema(
                    type=types.Type.STRING, description="The name of the store or merchant"
                ),
                "date": types.Schema(
                    type=types.Type.STRING,
                    description="The date of the transaction in YYYY-MM-DD format",
                ),
                "category": types.Schema(
                    type=types.Type.STRING,
                    enum=list(categories),
                    description="The best matching category",
                ),
            },
            required=["amount", "merchant", "date", "category"],
        )
        response = self._client.models.generate_content(
            model=self.model,
            contents=[
                types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                prompt,
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        return response.text


def build_provider(config: BaseConfig) -> Optional[GeminiProvider]:
    """Return the configured provider, or None when no credential is set."""

    if not config.gateway_enabled:
        logger.info("AI provider disabled: no API key configured")
        return None
    logger.info("AI provider enabled", extra={"model": config.GEMINI_MODEL})
    return GeminiProvider(api_key=config.GEMINI_API_KEY or "", model=config.GEMINI_MODEL)
