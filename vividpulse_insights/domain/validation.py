"""Validation and field-level merge for untrusted remote insight replies.

The provider is asked for a JSON object with the keys in ``REMOTE_SCHEMA``.
Each field is validated independently so one bad value does not discard
the rest of an otherwise useful reply.
"""

import json
import re
from dataclasses import replace
from typing import Annotated, Any, Dict, List, Tuple

from pydantic import Field, StringConstraints, TypeAdapter, ValidationError

from vividpulse_insights.domain.exceptions import EmptyResponseError, MalformedResponseError
from vividpulse_insights.domain.models import Insight, InsightSource, RemoteInsight
from vividpulse_insights.domain.scoring import classify_tier

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, strict=True)]

# Wire key -> (Insight attribute, validator)
_FIELDS: Dict[str, Tuple[str, TypeAdapter]] = {
    "analysis": ("analysis", TypeAdapter(NonBlankStr)),
    "forecast": ("forecast", TypeAdapter(NonBlankStr)),
    "recommendations": (
        "recommendations",
        TypeAdapter(Annotated[List[NonBlankStr], Field(min_length=3, max_length=3)]),
    ),
    "healthScore": ("health_score", TypeAdapter(Annotated[int, Field(strict=True, ge=0, le=100)])),
    "savingsPotential": ("savings_potential", TypeAdapter(NonBlankStr)),
}

# Schema descriptor handed to providers that support constrained output
REMOTE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "analysis": {"type": "string", "description": "1-2 sentence analysis of spending behaviour"},
        "forecast": {"type": "string", "description": "1 sentence month-end projection"},
        "recommendations": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 3,
            "maxItems": 3,
            "description": "Exactly 3 actionable tips",
        },
        "healthScore": {"type": "integer", "minimum": 0, "maximum": 100},
        "savingsPotential": {"type": "string", "description": "Formatted currency amount"},
    },
    "required": list(_FIELDS),
}


def _strip_markdown_fences(text: str) -> str:
    """Remove ```json ... ``` wrappers some models add despite instructions"""
    stripped = text.strip()
    match = re.match(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", stripped, re.DOTALL)
    if match:
        return match.group(1).strip()
    return stripped


def parse_remote_insight(raw_response: str | None) -> RemoteInsight:
    """
    Parse and validate a raw provider reply.

    Steps:
        1. Empty body -> EmptyResponseError
        2. Strip optional markdown fences and parse JSON
        3. Require a top-level object
        4. Validate each schema field independently

    Returns:
        RemoteInsight with rejected fields set to None and listed in
        ``invalid_fields``.

    Raises:
        EmptyResponseError: Blank reply.
        MalformedResponseError: Not JSON, not an object, or no usable field.
    """
    if raw_response is None or not raw_response.strip():
        raise EmptyResponseError("Provider returned an empty reply")

    cleaned = _strip_markdown_fences(raw_response)
    if not cleaned:
        raise EmptyResponseError("Provider returned an empty JSON block")

    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedResponseError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError("Top-level JSON must be an object")

    values: Dict[str, Any] = {}
    invalid: List[str] = []
    errors: List[str] = []

    for key, (attribute, adapter) in _FIELDS.items():
        if key not in data:
            invalid.append(attribute)
            errors.append(f"{key}: missing")
            continue
        try:
            value = adapter.validate_python(data[key])
        except ValidationError as e:
            invalid.append(attribute)
            errors.extend(f"{key}: {err['msg']}" for err in e.errors())
            continue
        values[attribute] = tuple(value) if isinstance(value, list) else value

    if len(invalid) == len(_FIELDS):
        raise MalformedResponseError("No field of the reply matches the schema: " + "; ".join(errors))

    return RemoteInsight(**values, invalid_fields=tuple(invalid), errors=tuple(errors))


def merge_insight(local: Insight, remote: RemoteInsight) -> Insight:
    """
    Overlay validated remote fields onto the local insight.

    Every invalid remote field keeps the local value. The result is REMOTE
    when all fields were valid, otherwise REMOTE_DEGRADED with the replaced
    fields named in the degradation reason.
    """
    overrides = {
        attribute: getattr(remote, attribute)
        for attribute, _ in _FIELDS.values()
        if getattr(remote, attribute) is not None
    }
    merged = replace(local, **overrides)
    tier = classify_tier(merged.health_score)

    if remote.fully_valid:
        return replace(merged, tier=tier, source=InsightSource.REMOTE, degradation_reason=None, failure=None)

    reason = "AI reply was incomplete; local values used for " + ", ".join(remote.invalid_fields)
    return replace(
        merged,
        tier=tier,
        source=InsightSource.REMOTE_DEGRADED,
        degradation_reason=reason,
        failure=None,
    )
