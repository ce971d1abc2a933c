"""Field validation shared by the payload and record models."""

from datetime import datetime
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from ..utils.error_handling import ValidationError

T = TypeVar('T')


def require_text(value: Any, field_name: str) -> str:
    """Return value if it is a string with visible characters."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            invalid_value=value
        )
    return value


def require_positive_int(value: Any, field_name: str) -> int:
    """Return value if it is an integer greater than zero."""
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            f"{field_name} must be a positive integer",
            field_name=field_name,
            invalid_value=value
        )
    return value


def require_timestamp(value: Any, field_name: str, optional: bool = False) -> Optional[datetime]:
    if value is None and optional:
        return None
    if not isinstance(value, datetime):
        raise ValidationError(
            f"{field_name} must be a datetime object",
            field_name=field_name,
            invalid_value=value
        )
    return value


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string written by a record's to_dict."""
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(
            "timestamp must be an ISO-8601 string",
            field_name="timestamp",
            invalid_value=value
        )


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def coerce_payload(payload: Union[T, Mapping[str, Any]], payload_cls: Type[T], action: str) -> T:
    """
    Turn a payload object or plain mapping into a validated payload instance.
    
    Args:
        payload: Either an instance of payload_cls or a mapping of its fields
        payload_cls: Payload dataclass exposing from_dict
        action: Short description used in the error message, e.g. "creating traffic record"
    
    Returns:
        A validated payload_cls instance
    
    Raises:
        ValidationError: If the payload is missing fields or holds invalid values
    """
    if isinstance(payload, payload_cls):
        return payload
    try:
        return payload_cls.from_dict(payload)
    except ValidationError as e:
        raise ValidationError(
            f"Invalid payload for {action}. {e.message}",
            field_name=e.field_name,
            invalid_value=e.invalid_value
        ) from e


def require_mapping(data: Any, required_keys) -> Mapping[str, Any]:
    """Check that data is a mapping holding every key in required_keys."""
    if not isinstance(data, Mapping):
        raise ValidationError(
            "payload must be a mapping",
            field_name=None,
            invalid_value=data
        )
    missing = [key for key in required_keys if key not in data]
    if missing:
        raise ValidationError(
            f"missing required fields: {', '.join(missing)}",
            field_name=missing[0],
            invalid_value=None
        )
    return data
