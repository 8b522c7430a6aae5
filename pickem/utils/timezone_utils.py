"""
Timezone utility functions for the pick'em pool application
"""

from datetime import datetime, timezone

import pytz
from flask import current_app, has_app_context


def get_app_timezone():
    """Get the application's configured timezone"""
    if not has_app_context():
        return pytz.UTC
    try:
        timezone_name = current_app.config.get("TIMEZONE", "UTC")
        return pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError:
        # Fallback to UTC if timezone is invalid
        return pytz.UTC


def get_utc_time():
    """Get current time in UTC"""
    return datetime.now(timezone.utc)


def ensure_utc(dt):
    """Return an aware UTC datetime; naive values are assumed to be UTC"""
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_timestamp(value):
    """
    Parse an ISO-8601 timestamp from a pools document

    Args:
        value: ISO-8601 string (a trailing "Z" is accepted) or a datetime

    Returns:
        datetime: Aware datetime in UTC

    Raises:
        MalformedRecordError: If the value is not a valid timestamp
    """
    # Lazy import to avoid circular imports
    from pickem.models.errors import MalformedRecordError

    if isinstance(value, datetime):
        return ensure_utc(value)

    if not isinstance(value, str):
        raise MalformedRecordError(f"Invalid timestamp: {value!r}")

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise MalformedRecordError(f"Invalid timestamp: {value!r}")

    return ensure_utc(parsed)


def convert_to_app_timezone(dt):
    """Convert a datetime to the application's timezone"""
    if dt is None:
        return None

    return ensure_utc(dt).astimezone(get_app_timezone())


def format_game_time(dt, format_str="%a %m/%d at %I:%M %p"):
    """Format a game time in the application's timezone"""
    if dt is None:
        return "TBD"

    app_time = convert_to_app_timezone(dt)
    return app_time.strftime(format_str)
