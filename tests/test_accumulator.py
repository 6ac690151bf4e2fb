"""Tests for the error and warning accumulator."""

from kestrel import ErrorAccumulator


class TestErrors:
    """Test error messages and field errors."""

    def test_starts_empty(self):
        """A new accumulator has nothing recorded."""
        acc = ErrorAccumulator()
        assert not acc.has_error_messages()
        assert not acc.has_error_fields()
        assert acc.error_messages == []
        assert acc.error_fields == {}

    def test_messages(self):
        """Messages accumulate in order and reset together."""
        acc = ErrorAccumulator()
        acc.add_error_message("first")
        acc.add_error_message("second")
        assert acc.has_error_messages()
        assert acc.error_messages == ["first", "second"]

        acc.reset_error_messages()
        assert acc.error_messages == []

    def test_fields_collect_reasons(self):
        """Several reasons for one field are kept in a list."""
        acc = ErrorAccumulator()
        acc.add_error_field("title", "Invalid min length")
        acc.add_error_field("title", "other")
        acc.add_error_field("id", "Invalid key value")
        assert acc.error_fields == {
            "title": ["Invalid min length", "other"],
            "id": ["Invalid key value"],
        }

    def test_reset_single_field(self):
        """Resetting one field leaves the others."""
        acc = ErrorAccumulator()
        acc.add_error_field("title", "bad")
        acc.add_error_field("id", "bad")
        acc.reset_error_fields("title")
        assert acc.error_fields == {"id": ["bad"]}

        acc.reset_error_fields("missing")
        acc.reset_error_fields()
        assert not acc.has_error_fields()

    def test_returned_collections_are_copies(self):
        """Mutating a returned list does not change the accumulator."""
        acc = ErrorAccumulator()
        acc.add_error_field("title", "bad")
        acc.error_fields["title"].append("sneaky")
        acc.error_messages.append("sneaky")
        assert acc.error_fields == {"title": ["bad"]}
        assert acc.error_messages == []


class TestWarnings:
    """Test warning channels and global resets."""

    def test_warning_channels(self):
        """Warnings mirror the error API."""
        acc = ErrorAccumulator()
        acc.add_warning_message("careful")
        acc.add_warning_field("email", "looks odd")
        assert acc.has_warning_messages()
        assert acc.has_warning_fields()
        assert acc.warning_messages == ["careful"]
        assert acc.warning_fields == {"email": ["looks odd"]}

        acc.reset_warning_fields("email")
        acc.reset_warning_messages()
        assert not acc.has_warning_fields()
        assert not acc.has_warning_messages()

    def test_reset_all_errors_keeps_warnings(self):
        """reset_all_errors only touches errors."""
        acc = ErrorAccumulator()
        acc.add_error_message("error")
        acc.add_error_field("id", "error")
        acc.add_warning_message("warning")
        acc.add_warning_field("id", "warning")

        acc.reset_all_errors()
        assert not acc.has_error_messages()
        assert not acc.has_error_fields()
        assert acc.warning_messages == ["warning"]
        assert acc.warning_fields == {"id": ["warning"]}

    def test_reset_all(self):
        """reset_all clears both severities."""
        acc = ErrorAccumulator()
        acc.add_error_message("error")
        acc.add_warning_field("id", "warning")

        acc.reset_all()
        assert not acc.has_error_messages()
        assert not acc.has_warning_fields()
