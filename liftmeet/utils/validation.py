"""
Request payload parsing shared by the flight, result and nomination routes.
Every helper raises ValidationError with a message that can go straight to the client.
"""

from datetime import datetime, timezone

from ..errors import ValidationError


def require_fields(data: dict, *fields: str) -> None:
    missing = [f for f in fields if data.get(f) is None]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


def parse_enum(enum_cls, value, field: str):
    """Look an enum member up by its wire value."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field} '{value}'. Expected one of: {allowed}")


def parse_int(value, field: str, minimum: int | None = None, maximum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field} must be at most {maximum}")
    return number


def parse_optional_int(value, field: str, **bounds) -> int | None:
    if value is None:
        return None
    return parse_int(value, field, **bounds)


def parse_weight(value, field: str) -> float | None:
    """Weights are kilograms; null means 'not declared yet'."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        weight = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")
    if weight < 0:
        raise ValidationError(f"{field} cannot be negative")
    return weight


def parse_datetime(value, field: str) -> datetime | None:
    """Parse an ISO-8601 timestamp into a naive UTC datetime."""
    if value in (None, ""):
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be an ISO-8601 timestamp")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 timestamp")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_id_list(value, field: str) -> list[int]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be an array")
    return [parse_int(item, field, minimum=1) for item in value]
