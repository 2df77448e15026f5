"""OpenAI-compatible chat completions adapter"""

import json
from typing import Any, Dict
from vividpulse_insights.config import settings
from vividpulse_insights.domain.exceptions import EmptyResponseError, MalformedResponseError
from vividpulse_insights.infrastructure.clients.base import InsightProvider
from vividpulse_insights.infrastructure.credentials import Credential


class OpenAIProvider(InsightProvider):
    """Client for /chat/completions endpoints in JSON-object mode"""

    name = "openai"

    def __init__(self, model: str | None = None, api_base: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.model = model or settings.openai_model
        self.api_base = (api_base or settings.openai_api_base).rstrip("/")

    async def generate(
        self,
        instruction: str,
        data: Dict[str, Any],
        schema: Dict[str, Any],
        credential: Credential,
    ) -> str:
        # JSON-object mode does not enforce a schema, so it travels in the prompt
        system_prompt = f"{instruction}\n\nRespond with one JSON object matching this schema:\n{json.dumps(schema)}"
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": json.dumps(data)},
            ],
            "response_format": {"type": "json_object"},
            "temperature": 0.2,
        }
        envelope = await self._post_json(
            f"{self.api_base}/chat/completions",
            headers={"Authorization": f"Bearer {credential.value}"},
            body=body,
        )

        choices = envelope.get("choices") or []
        if not isinstance(choices, list):
            raise MalformedResponseError("openai choices is not a list")
        if not choices:
            raise EmptyResponseError("openai returned no choices")

        try:
            content = choices[0]["message"].get("content") or ""
        except (KeyError, AttributeError, TypeError) as e:
            raise MalformedResponseError("openai choice has an unexpected shape") from e

        if not isinstance(content, str):
            raise MalformedResponseError("openai message content is not text")
        return content
