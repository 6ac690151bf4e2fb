"""Tests for rule objects and validator helpers."""

import pytest

from kestrel import CustomRule, EmailRule, Field, FieldError
from kestrel.validators import Bounds, is_numeric, to_text
from kestrel.validators.core import parse_bound, parse_range


class NoAzerty(CustomRule):
    """Rejects the value 'azerty'."""

    def apply(self, value):
        if value == "azerty":
            raise FieldError("invalid azerty value")
        return value


class TestEmailRule:
    """Test the email rule."""

    def test_rejections(self):
        """The @ must be neither first nor last, and must be present."""
        field = Field("varchar", ["email"])
        for value in ("@", "a@", "@a", "a"):
            with pytest.raises(FieldError, match="Invalid email value"):
                field.coerce(value)

    def test_accepts_inner_at(self):
        """A single inner @ is enough."""
        assert Field("varchar", ["email"]).coerce("a@a") == "a@a"
        assert EmailRule().apply("user@example.com") == "user@example.com"

    def test_runs_after_truncation(self):
        """The email check sees the value after max truncation."""
        with pytest.raises(FieldError, match="Invalid email value"):
            Field("varchar", ["max:2", "email"]).coerce("a@b")


class TestCustomRule:
    """Test caller-defined rules."""

    def test_custom_rule_rejects(self):
        """A FieldError from a rule aborts coercion with its message."""
        field = Field("varchar", [NoAzerty()])
        with pytest.raises(FieldError, match="invalid azerty value"):
            field.coerce("azerty")
        assert field.coerce("qwerty") == "qwerty"

    def test_custom_rule_with_email(self):
        """Built-in and custom rules share the pipeline, in order."""
        field = Field("varchar", ["email", NoAzerty()])
        assert len(field.rules) == 2
        with pytest.raises(FieldError, match="Invalid email value"):
            field.coerce("azerty")

    def test_custom_rule_checks_default(self):
        """Defaults go through custom rules at construction."""
        with pytest.raises(FieldError, match="invalid azerty value"):
            Field("varchar", [NoAzerty()], "azerty")

    def test_abstract(self):
        """CustomRule cannot be used without apply."""
        with pytest.raises(TypeError):
            CustomRule()


class TestValidatorHelpers:
    """Test numeric detection, text casting and bounds."""

    def test_is_numeric(self):
        """Numbers and numeric strings are numeric; booleans are not."""
        for value in (1, -2.5, "10", " +3 ", "1e3", ".5", "5."):
            assert is_numeric(value), value
        for value in (True, None, "", "abc", "1_000", float("nan"), float("inf"), [1]):
            assert not is_numeric(value), value

    def test_to_text(self):
        """Scalars render the way text columns store them."""
        assert to_text(50.0) == "50"
        assert to_text(0.25) == "0.25"
        assert to_text(True) == "1"
        assert to_text(7) == "7"

    def test_parse_bound(self):
        """Bounds parse to ints or floats; empty means none."""
        assert parse_bound("5", as_float=False) == 5
        assert parse_bound("5.5", as_float=True) == 5.5
        assert parse_bound("", as_float=False) is None
        with pytest.raises(ValueError):
            parse_bound("x", as_float=False)

    def test_parse_range(self):
        """Ranges need two numbers."""
        assert parse_range("1,3", as_float=False) == (1, 3)
        for text in ("1", "1,", "1,2,3"):
            with pytest.raises(ValueError):
                parse_range(text, as_float=False)

    def test_bounds_clamp_sequence(self):
        """min, max and range apply one after the other."""
        bounds = Bounds(min=0, max=10, range=(2, 5))
        assert bounds.clamp(-1) == 2
        assert bounds.clamp(7) == 5
