"""
Line-tagged diagnostics.

Fatal errors render as ``ERROR [line N]: <message>`` and truncation
warnings as ``WARNING [line N]: <message>``.
"""

from dataclasses import dataclass
from typing import Optional

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single reportable condition.

    Attributes:
        severity: ERROR or WARNING
        message: Human readable description
        line_num: 1-based source line, or None when not tied to a line
    """

    severity: str
    message: str
    line_num: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.severity == ERROR

    def __str__(self) -> str:
        label = self.severity.upper()
        if self.line_num is None:
            return f"{label}: {self.message}"
        return f"{label} [line {self.line_num}]: {self.message}"


def error(message: str, line_num: Optional[int] = None) -> Diagnostic:
    """Create an error diagnostic."""
    return Diagnostic(ERROR, message, line_num)


def warning(message: str, line_num: Optional[int] = None) -> Diagnostic:
    """Create a warning diagnostic."""
    return Diagnostic(WARNING, message, line_num)


def truncation_warning(value: int, width: int, line_num: Optional[int]) -> Diagnostic:
    """Warning for an operand that does not fit its encoded field."""
    return warning(
        f"Value will be truncated to {width} bit(s) in width: {value}", line_num
    )
