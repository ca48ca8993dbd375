"""Unit tests for configuration error hints."""

import pytest

from src.config.error_hints import ERROR_HINTS, FIELD_HINTS, format_validation_error, get_error_hint


class TestGetErrorHint:
    """Tests for get_error_hint."""

    @pytest.mark.unit
    def test_field_hint_wins(self) -> None:
        """Test that a known field overrides the generic type hint."""
        assert get_error_hint("greater_than", "max_dist") == FIELD_HINTS["max_dist"]

    @pytest.mark.unit
    def test_innermost_field_is_used(self) -> None:
        """Test that nested paths resolve to the innermost known key."""
        assert get_error_hint("enum", "filter.economy.list.0") == FIELD_HINTS["list"]

    @pytest.mark.unit
    def test_falls_back_to_type(self) -> None:
        """Test the error type hint for an unknown field."""
        assert get_error_hint("missing", "filter.unknown") == ERROR_HINTS["missing"]

    @pytest.mark.unit
    def test_unknown_everything(self) -> None:
        """Test the generic fallback."""
        assert "documentation" in get_error_hint("something_new")


class TestFormatValidationError:
    """Tests for format_validation_error."""

    @pytest.mark.unit
    def test_with_hint(self) -> None:
        """Test formatting with a hint line."""
        result = format_validation_error("mode", "Input should be 'oneshot' or 'update'", "enum")

        assert result.startswith("mode: Input should be")
        assert "Hint: Must be 'oneshot' or 'update'." in result

    @pytest.mark.unit
    def test_without_hint(self) -> None:
        """Test formatting without a hint."""
        result = format_validation_error("mode", "bad", "enum", include_hint=False)

        assert result == "mode: bad"
