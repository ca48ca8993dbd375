"""Error hints for configuration validation errors.

Maps pydantic error types and field names to short remediation hints
shown by ``stale-stations validate``.
"""

from typing import Final


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to your configuration.",
    "extra_forbidden": "Unknown field. Check the spelling against the documented keys.",
    "enum": "Check the allowed values in the documentation.",
    "int_type": "This field must be an integer (whole number).",
    "int_parsing": "This field must be an integer (whole number).",
    "float_type": "This field must be a number.",
    "float_parsing": "This field must be a number.",
    "string_type": "This field must be a text string.",
    "bool_type": "This field must be true or false.",
    "bool_parsing": "This field must be true or false.",
    "list_type": "This field must be a list.",
    "dict_type": "This field must be a mapping.",
    "model_type": "This field must be a mapping of settings.",
    "greater_than": "The value is too small. Check the minimum allowed.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "too_short": "The list must not be empty.",
    "string_pattern_mismatch": "The format is invalid.",
    "value_error": "Check the value against the documented constraints.",
    "file_not_found": "The file does not exist. Check the --config path.",
    "yaml_parse_error": "Invalid YAML syntax. Check for proper indentation and formatting.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "max_entries": "Must be 0 (show all) or a positive row count.",
    "max_dist": "Must be a positive distance in light years.",
    "mode": "Must be 'oneshot' or 'update'.",
    "pos_origin": "Must be 'current' or 'sol'.",
    "threshold_days": "Must be -1 (flag any timestamp) or a non-negative day count.",
    "overrides": (
        "Keys are information, market, shipyard, outfitting; "
        "values are day thresholds (-1 or more)."
    ),
    "exclude_names": "Must be a list of regular expressions matched against station names.",
    "exclude_systems": "Must be a list of regular expressions matched against system names.",
    "list": "Must be a non-empty list of economies, e.g. [Extraction, Refinery].",
    "max": "Must be a non-negative distance in light seconds.",
    "l_pad_only": "Must be true or false.",
    "include": "Must be true or false.",
    "retry_policy": "Set max_retries (0-10), base_delay_ms and max_delay_ms.",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing', 'enum').
        field_name: Optional dotted field path for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        # Use the innermost key that is not a list index
        parts = [p for p in field_name.split(".") if not p.isdigit()]
        for part in reversed(parts):
            if part in FIELD_HINTS:
                return FIELD_HINTS[part]

    return ERROR_HINTS.get(
        error_type, "Check the configuration documentation for valid values."
    )


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., 'filter.economy.list').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
