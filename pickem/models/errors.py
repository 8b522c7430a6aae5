"""
Record parsing errors and field helpers shared by the model classes
"""


class MalformedRecordError(ValueError):
    """Raised when a pools, results or entries record is missing a field or has the wrong type."""

    pass


def require_field(data, key, context="record"):
    """
    Get a required field from a raw record

    Args:
        data: Raw dict parsed from JSON
        key: Field name
        context: Description of the record for the error message

    Returns:
        The field value

    Raises:
        MalformedRecordError: If the field is missing, None or empty
    """
    value = data.get(key)
    if value is None or value == "":
        raise MalformedRecordError(f"{context}: missing {key}")
    return value


def require_number(data, key, context="record"):
    """Get a required numeric field, rejecting strings and booleans"""
    value = require_field(data, key, context=context)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedRecordError(f"{context}: {key} must be numeric, got {value!r}")
    return value
