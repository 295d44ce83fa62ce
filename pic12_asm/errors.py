"""
Custom exception types for the PIC12 assembler.

Components raise these and never print or exit; the command line driver
and the web handlers are the only places that turn them into output.
"""

from typing import Optional

from .diagnostics import Diagnostic, error


class AssemblerError(Exception):
    """Base exception for assembler errors."""

    def __init__(self, message: str, line_num: Optional[int] = None):
        self.message = message
        self.line_num = line_num
        super().__init__(message)

    def to_diagnostic(self) -> Diagnostic:
        """Return the fatal diagnostic describing this error."""
        return error(self.message, self.line_num)

    def __str__(self) -> str:
        return str(self.to_diagnostic())


class ParseError(AssemblerError):
    """Exception raised for tokenizing and operand parsing errors."""

    pass


class UnknownMnemonicError(ParseError):
    """A token is neither a label nor a known mnemonic."""

    pass


class MalformedLiteralError(ParseError):
    """A numeric operand is not written as 0x followed by hex digits."""

    pass


class MissingOperandError(ParseError):
    """The token stream ended while an operand was still required."""

    pass


class EncodingError(AssemblerError):
    """Exception raised for instruction encoding errors (strict mode)."""

    pass


class ConfigError(AssemblerError):
    """Raised when a configuration file is invalid."""

    pass
