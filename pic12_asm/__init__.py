"""
PIC12 Assembler - an assembler for the baseline (12-bit core) PIC instruction set.

This package translates mnemonic source into the packed program-memory bit-stream.
"""

from .assembler import Assembler
from .errors import AssemblerError, ParseError, EncodingError

__version__ = "1.0.0"
__all__ = ["Assembler", "AssemblerError", "ParseError", "EncodingError"]
