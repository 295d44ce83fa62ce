"""
Baseline PIC instruction definitions.

This module defines all 33 supported instructions with their fixed opcode
prefix, the operands read from source, and the variable fields emitted
after the prefix. Every definition encodes to one 12-bit program word.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum, auto


WORD_BITS = 12


class InstructionFormat(Enum):
    """Operand shapes of the baseline instruction set."""

    BYTE = auto()  # Byte-oriented file register operations: f, d
    REGISTER = auto()  # Register-only operations: f or nothing
    BIT = auto()  # Bit-oriented file register operations: f, b
    LITERAL = auto()  # Literal and control operations: k, f or nothing


@dataclass(frozen=True)
class InstructionDef:
    """
    Definition of a baseline instruction.

    Attributes:
        name: Canonical upper-case mnemonic
        format: Operand shape
        prefix: Fixed opcode bit pattern
        prefix_bits: Width of the prefix
        operands: Operand names in the order they are written in source
        fields: (name, width) pairs in the order they are encoded
    """

    name: str
    format: InstructionFormat
    prefix: int
    prefix_bits: int
    operands: Tuple[str, ...] = ()
    fields: Tuple[Tuple[str, int], ...] = ()

    @property
    def width(self) -> int:
        """Total encoded width in bits."""
        return self.prefix_bits + sum(width for _, width in self.fields)

    def prefix_string(self) -> str:
        """Prefix rendered as a fixed-width binary string."""
        return format(self.prefix, f"0{self.prefix_bits}b")


def _byte_op(name: str, prefix: int) -> InstructionDef:
    return InstructionDef(
        name, InstructionFormat.BYTE, prefix, 6, ("f", "d"), (("d", 1), ("f", 5))
    )


def _bit_op(name: str, prefix: int) -> InstructionDef:
    return InstructionDef(
        name, InstructionFormat.BIT, prefix, 4, ("f", "b"), (("b", 3), ("f", 5))
    )


def _literal_op(name: str, prefix: int) -> InstructionDef:
    return InstructionDef(
        name, InstructionFormat.LITERAL, prefix, 4, ("k",), (("k", 8),)
    )


def _fixed_op(name: str, fmt: InstructionFormat, word: int) -> InstructionDef:
    return InstructionDef(name, fmt, word, WORD_BITS)


_DEFINITIONS = [
    # -------------------------------------------------------------------------
    # Byte-oriented file register operations: 6-bit prefix, d(1), f(5)
    # -------------------------------------------------------------------------
    _byte_op("ADDWF", 0b000111),
    _byte_op("ANDWF", 0b000101),
    _byte_op("COMF", 0b001001),
    _byte_op("DECF", 0b000011),
    _byte_op("DECFSZ", 0b001011),
    _byte_op("INCF", 0b001010),
    _byte_op("INCFSZ", 0b001111),
    _byte_op("IORWF", 0b000100),
    _byte_op("MOVF", 0b001000),
    _byte_op("RLF", 0b001101),
    _byte_op("RRF", 0b001100),
    _byte_op("SUBWF", 0b000010),
    _byte_op("SWAPF", 0b001110),
    _byte_op("XORWF", 0b000110),
    # -------------------------------------------------------------------------
    # Register-only operations
    # -------------------------------------------------------------------------
    InstructionDef("CLRF", InstructionFormat.REGISTER, 0b0000011, 7, ("f",), (("f", 5),)),
    InstructionDef("MOVWF", InstructionFormat.REGISTER, 0b0000001, 7, ("f",), (("f", 5),)),
    _fixed_op("CLRW", InstructionFormat.REGISTER, 0b000001000000),
    _fixed_op("NOP", InstructionFormat.REGISTER, 0b000000000000),
    # -------------------------------------------------------------------------
    # Bit-oriented file register operations: 4-bit prefix, b(3), f(5)
    # -------------------------------------------------------------------------
    _bit_op("BCF", 0b0100),
    _bit_op("BSF", 0b0101),
    _bit_op("BTFSC", 0b0110),
    _bit_op("BTFSS", 0b0111),
    # -------------------------------------------------------------------------
    # Literal and control operations
    # -------------------------------------------------------------------------
    _literal_op("ANDLW", 0b1110),
    _literal_op("CALL", 0b1001),
    _literal_op("IORLW", 0b1101),
    _literal_op("MOVLW", 0b1100),
    _literal_op("RETLW", 0b1000),
    _literal_op("XORLW", 0b1111),
    InstructionDef("GOTO", InstructionFormat.LITERAL, 0b101, 3, ("k",), (("k", 9),)),
    InstructionDef("TRIS", InstructionFormat.LITERAL, 0b000000000, 9, ("f",), (("f", 3),)),
    _fixed_op("CLRWDT", InstructionFormat.LITERAL, 0b000000000100),
    _fixed_op("OPTION", InstructionFormat.LITERAL, 0b000000000010),
    _fixed_op("SLEEP", InstructionFormat.LITERAL, 0b000000000011),
]

INSTRUCTIONS = {definition.name: definition for definition in _DEFINITIONS}


def get_instruction(mnemonic: str) -> Optional[InstructionDef]:
    """
    Look up an instruction by mnemonic.

    Args:
        mnemonic: Instruction mnemonic (case-insensitive)

    Returns:
        InstructionDef if found, None otherwise
    """
    return INSTRUCTIONS.get(mnemonic.upper())


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a valid instruction."""
    return mnemonic.upper() in INSTRUCTIONS


def get_all_mnemonics() -> list:
    """Get a list of all supported instruction mnemonics."""
    return list(INSTRUCTIONS.keys())
