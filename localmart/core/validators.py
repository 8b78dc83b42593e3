# localmart/core/validators.py
from datetime import datetime, timezone

from .errors import InvalidInputError


def require_id(value, field):
    """Coerces an identifier from a JSON body into an int."""
    if value is None or value == "":
        raise InvalidInputError(f"'{field}' is required.")
    if isinstance(value, bool):
        raise InvalidInputError(f"'{field}' must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"'{field}' must be an integer.")


def require_text(value, field, max_length=None):
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"'{field}' cannot be empty.")
    text = value.strip()
    if max_length is not None and len(text) > max_length:
        raise InvalidInputError(f"'{field}' cannot be longer than {max_length} characters.")
    return text


def parse_timestamp(value, field="after"):
    """
    Parses an ISO-8601 cursor into the naive UTC form stored in the database.

    Naive values are taken as UTC; aware values are converted. ``None`` and the
    empty string mean "no cursor".
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise InvalidInputError(f"'{field}' must be an ISO-8601 timestamp.")
    else:
        raise InvalidInputError(f"'{field}' must be an ISO-8601 timestamp.")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
