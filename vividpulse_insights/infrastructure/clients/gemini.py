"""Gemini generateContent adapter"""

import json
from typing import Any, Dict
from vividpulse_insights.config import settings
from vividpulse_insights.domain.exceptions import EmptyResponseError, MalformedResponseError
from vividpulse_insights.infrastructure.clients.base import InsightProvider
from vividpulse_insights.infrastructure.credentials import Credential


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a JSON-schema style descriptor to Gemini's upper-case type names"""
    converted: Dict[str, Any] = {}
    for key, value in schema.items():
        if key == "type" and isinstance(value, str):
            converted[key] = value.upper()
        elif key == "properties":
            converted[key] = {name: to_gemini_schema(prop) for name, prop in value.items()}
        elif key == "items":
            converted[key] = to_gemini_schema(value)
        else:
            converted[key] = value
    return converted


class GeminiProvider(InsightProvider):
    """Client for the Gemini generateContent API with JSON-constrained output"""

    name = "gemini"

    def __init__(self, model: str | None = None, api_base: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.model = model or settings.gemini_model
        self.api_base = (api_base or settings.gemini_api_base).rstrip("/")

    async def generate(
        self,
        instruction: str,
        data: Dict[str, Any],
        schema: Dict[str, Any],
        credential: Credential,
    ) -> str:
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": f"{instruction}\n\nData:\n{json.dumps(data)}"}],
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": to_gemini_schema(schema),
                "temperature": 0.2,
            },
        }
        envelope = await self._post_json(
            f"{self.api_base}/models/{self.model}:generateContent",
            headers={"x-goog-api-key": credential.value},
            body=body,
        )

        candidates = envelope.get("candidates") or []
        if not isinstance(candidates, list):
            raise MalformedResponseError("gemini candidates is not a list")
        if not candidates:
            raise EmptyResponseError("gemini returned no candidates")

        try:
            parts = candidates[0].get("content", {}).get("parts", [])
            return "".join(part.get("text", "") for part in parts)
        except (AttributeError, TypeError) as e:
            raise MalformedResponseError("gemini candidate has an unexpected shape") from e
