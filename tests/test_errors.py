"""
Tests for error handling module.

Tests the centralized error handling with rich context and suggestions.
"""

import pytest


class TestErrorContext:
    """Test ErrorContext creation and conversion."""

    def test_from_typeset_error(self):
        """Test ErrorContext from TypesetError."""
        from mathchat.utils.errors import TypesetError, ErrorContext, ErrorSeverity

        exc = TypesetError(
            "Could not typeset expression",
            expression=r"\frac{x}",
            technical_details="Expected \\frac{num}{den}",
        )

        ctx = ErrorContext.from_exception(exc)

        assert ctx.title == "Math Error"
        assert "typeset" in ctx.message
        assert ctx.severity == ErrorSeverity.WARNING
        assert ctx.recoverable is True

    def test_from_mathtext_value_error(self):
        """Test ErrorContext from a raw mathtext parse error."""
        from mathchat.utils.errors import ErrorContext

        exc = ValueError("Unknown symbol: \\foo, found '\\'  (at char 0)")
        ctx = ErrorContext.from_exception(exc)

        assert ctx.title == "Math Syntax Error"
        assert "Unknown symbol" in ctx.technical_details

    def test_from_import_error(self):
        """Test that missing dependencies are critical."""
        from mathchat.utils.errors import ErrorContext, ErrorSeverity

        ctx = ErrorContext.from_exception(ImportError("No module named 'matplotlib'"))

        assert ctx.severity == ErrorSeverity.CRITICAL
        assert ctx.recoverable is False

    def test_from_generic_exception(self):
        """Test ErrorContext from generic exception."""
        from mathchat.utils.errors import ErrorContext

        exc = RuntimeError("Something went wrong")
        ctx = ErrorContext.from_exception(exc, context="during rendering")

        assert ctx.title == "Error"
        assert "Something went wrong" in ctx.message
        assert "rendering" in ctx.technical_details


class TestMathChatError:
    """Test base MathChatError class."""

    def test_custom_suggestions(self):
        """Test error with custom suggestions."""
        from mathchat.utils.errors import TypesetError

        exc = TypesetError("Cannot typeset", suggestions=["Try X", "Try Y"])

        assert exc.suggestions == ["Try X", "Try Y"]

    def test_default_suggestions_are_copied(self):
        """Test that instances do not share the class suggestion list."""
        from mathchat.utils.errors import TypesetError

        exc = TypesetError("first")
        exc.suggestions.append("extra")

        assert "extra" not in TypesetError("second").suggestions

    def test_config_error_not_recoverable(self):
        """Test that configuration errors are critical."""
        from mathchat.utils.errors import ConfigError

        ctx = ConfigError("bad config").to_context()

        assert ctx.title == "Configuration Error"
        assert ctx.recoverable is False


class TestUnbalancedBracesError:
    """Test specialized UnbalancedBracesError."""

    def test_missing_close_braces(self):
        """Test error when closing braces are missing."""
        from mathchat.utils.errors import UnbalancedBracesError

        exc = UnbalancedBracesError(r"\frac{x}{y", open_count=2, close_count=1)

        assert "1" in str(exc)
        assert "closing" in str(exc).lower()
        assert exc.expression == r"\frac{x}{y"

    def test_missing_open_braces(self):
        """Test error when opening braces are missing."""
        from mathchat.utils.errors import UnbalancedBracesError

        exc = UnbalancedBracesError(r"x}{y}", open_count=1, close_count=3)

        assert "2" in str(exc)
        assert "opening" in str(exc).lower()


class TestBraceCheck:
    """Test the pre-typeset brace balance check."""

    def test_balanced_passes(self):
        """Test that balanced expressions pass."""
        from mathchat.utils.errors import check_brace_balance

        check_brace_balance(r"\frac{a}{b^{2}}")

    def test_escaped_braces_ignored(self):
        """Test that \\{ and \\} are not counted."""
        from mathchat.utils.errors import check_brace_balance

        check_brace_balance(r"\left\{ x \mid x > 0 \right.")

    def test_unbalanced_raises(self):
        """Test that a missing brace raises with counts."""
        from mathchat.utils.errors import check_brace_balance, UnbalancedBracesError

        with pytest.raises(UnbalancedBracesError) as exc_info:
            check_brace_balance(r"\sqrt{x")

        assert exc_info.value.open_count == 1
        assert exc_info.value.close_count == 0


class TestFormatFunctions:
    """Test error formatting utility functions."""

    def test_format_error_for_user(self):
        """Test brief user-friendly formatting."""
        from mathchat.utils.errors import format_error_for_user, TypesetError

        msg = format_error_for_user(TypesetError("Bad LaTeX"), "testing")

        assert msg.startswith("Bad LaTeX")
        assert "Try:" in msg

    def test_format_without_suggestions(self):
        """Test formatting when no suggestion is available."""
        from mathchat.utils.errors import format_error_for_user, MathChatError

        assert format_error_for_user(MathChatError("Plain failure")) == "Plain failure"


class TestTypesetErrorWrapping:
    """Test converting engine exceptions into TypesetErrors."""

    def test_typeset_error_from_exception(self):
        """Test wrapping an engine exception as a TypesetError."""
        from mathchat.utils.errors import TypesetError, ErrorSeverity

        exc = TypesetError.from_exception(RuntimeError("boom"), expression="x", context="mathjax")

        assert exc.expression == "x"
        assert "boom" in exc.user_message
        assert "mathjax" in exc.technical_details
        assert exc.severity == ErrorSeverity.ERROR
