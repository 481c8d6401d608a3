"""
Centralized error handling for mathchat.

Provides a hierarchy of custom exceptions with user-friendly messages,
suggestions for fixes, and error recovery hints.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, List


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    WARNING = auto()  # Non-fatal, rendering continues with a fallback
    ERROR = auto()  # Operation failed, but can retry
    CRITICAL = auto()  # Unrecoverable error


@dataclass
class ErrorContext:
    """
    Rich context for error reporting.

    Provides user-friendly information beyond the raw exception.
    """

    title: str  # Short title for tooltips and status lines
    message: str  # User-friendly message
    technical_details: Optional[str]  # Debug info
    suggestions: List[str]  # Actionable suggestions
    severity: ErrorSeverity
    recoverable: bool = True

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "") -> "ErrorContext":
        """Create ErrorContext from any exception using smart detection."""
        exc_type = type(exc).__name__
        exc_msg = str(exc)

        if isinstance(exc, MathChatError):
            return exc.to_context()

        # matplotlib mathtext reports syntax problems as ValueError
        if isinstance(exc, ValueError) and (
            "expected" in exc_msg.lower() or "unknown symbol" in exc_msg.lower()
        ):
            return cls(
                title="Math Syntax Error",
                message="The expression could not be typeset.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check for unbalanced braces { }",
                    "Verify LaTeX command spelling (e.g., \\frac not \\frc)",
                ],
                severity=ErrorSeverity.WARNING,
            )

        if isinstance(exc, ImportError):
            return cls(
                title="Missing Dependency",
                message="A required component is not installed.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check that all dependencies are installed",
                    "Run: pip install -e .[dev]",
                ],
                severity=ErrorSeverity.CRITICAL,
                recoverable=False,
            )

        # Generic fallback
        return cls(
            title="Error",
            message=f"An unexpected error occurred: {exc_msg}",
            technical_details=f"{exc_type}: {exc_msg}\nContext: {context}",
            suggestions=["Try again"],
            severity=ErrorSeverity.ERROR,
        )


class MathChatError(Exception):
    """
    Base exception for all mathchat errors.

    Subclasses provide rich error context for user-friendly reporting.
    """

    default_title = "Error"
    default_suggestions: List[str] = []
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        *,
        suggestions: Optional[List[str]] = None,
        technical_details: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
    ):
        super().__init__(message)
        self.user_message = message
        self.suggestions = suggestions or self.default_suggestions.copy()
        self.technical_details = technical_details
        self.severity = severity or self.default_severity

    def to_context(self) -> ErrorContext:
        """Convert to ErrorContext for display."""
        return ErrorContext(
            title=self.default_title,
            message=self.user_message,
            technical_details=self.technical_details,
            suggestions=self.suggestions,
            severity=self.severity,
            recoverable=self.severity != ErrorSeverity.CRITICAL,
        )


# === Typesetting Errors ===


class TypesetError(MathChatError):
    """Raised or reported when a math expression cannot be typeset."""

    default_title = "Math Error"
    default_severity = ErrorSeverity.WARNING
    default_suggestions = [
        "Check for missing or extra braces { }",
        "Verify LaTeX commands are spelled correctly",
    ]

    def __init__(self, message: str, *, expression: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.expression = expression

    @classmethod
    def from_exception(
        cls, exc: Exception, expression: str = "", context: str = ""
    ) -> "TypesetError":
        """Wrap an engine exception, keeping the message and hints ErrorContext picks."""
        ctx = ErrorContext.from_exception(exc, context)
        return cls(
            ctx.message,
            expression=expression,
            suggestions=ctx.suggestions,
            technical_details=ctx.technical_details,
            severity=ctx.severity,
        )


class UnbalancedBracesError(TypesetError):
    """Raised when braces are unbalanced."""

    default_title = "Unbalanced Braces"

    def __init__(self, expression: str, open_count: int, close_count: int):
        diff = open_count - close_count
        if diff > 0:
            msg = f"Missing {diff} closing brace(s) '}}'"
        else:
            msg = f"Missing {-diff} opening brace(s) '{{'"

        super().__init__(
            msg,
            expression=expression,
            suggestions=[
                f"Current count: {open_count} opening, {close_count} closing",
                "Add the missing braces to balance the expression",
            ],
        )
        self.open_count = open_count
        self.close_count = close_count


class UnsupportedBackendError(TypesetError):
    """Raised when a typesetting backend is unknown or unavailable."""

    default_title = "Unsupported Backend"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(self, backend: str, available: Optional[List[str]] = None):
        available = available or []
        super().__init__(
            f"Typesetting backend '{backend}' is not available",
            suggestions=[f"Use one of: {', '.join(available)}"] if available else [],
        )
        self.backend = backend


# === Configuration Errors ===


class ConfigError(MathChatError):
    """Raised when configuration cannot be loaded or validated."""

    default_title = "Configuration Error"
    default_severity = ErrorSeverity.CRITICAL
    default_suggestions = [
        "Check the YAML syntax of the configuration file",
        "Check MATHCHAT_CONFIG_OVERRIDES is valid JSON",
    ]


# === Utility functions ===


def format_error_for_user(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a user-friendly string.

    Returns a single string suitable for a status line or tooltip.
    """
    ctx = ErrorContext.from_exception(exc, context)

    result = ctx.message
    if ctx.suggestions:
        result += f" Try: {ctx.suggestions[0]}"

    return result


def check_brace_balance(expression: str) -> None:
    """
    Raise UnbalancedBracesError if `{` and `}` counts differ.

    Escaped braces (`\\{`, `\\}`) are literal delimiters and are not counted.
    """
    stripped = expression.replace("\\{", "").replace("\\}", "")
    open_count = stripped.count("{")
    close_count = stripped.count("}")
    if open_count != close_count:
        raise UnbalancedBracesError(expression, open_count, close_count)
