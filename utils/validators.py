"""Input validation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from core.exceptions import ValidationError

MAX_FIELD_LENGTH = 512


@dataclass(frozen=True)
class ParticipationRequest:
    location_id: str
    access_time: Optional[str]
    user_agent: Optional[str]


def _optional_text(payload: dict, key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{key}' must be a string")
    if len(value) > MAX_FIELD_LENGTH:
        raise ValidationError(f"'{key}' is too long")
    return value


def validate_location_id(value: Any) -> bool:
    return isinstance(value, str) and 0 < len(value.strip()) <= MAX_FIELD_LENGTH


def parse_participation(payload: Any) -> ParticipationRequest:
    """Validate the body of a participation request.

    Raises:
        ValidationError: If the body is not an object or a field has the wrong type
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    location_id = payload.get("locationId")
    if not validate_location_id(location_id):
        raise ValidationError("'locationId' must be a non-empty string")

    return ParticipationRequest(
        location_id=location_id,
        access_time=_optional_text(payload, "accessTime"),
        user_agent=_optional_text(payload, "userAgent"),
    )
