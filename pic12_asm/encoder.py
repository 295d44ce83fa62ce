"""
Baseline PIC instruction encoder.

Serializes parsed instructions into a packed bit-stream. Each instruction
contributes its fixed opcode prefix followed by its variable fields, most
significant bit first. Instructions are packed back to back with no
padding; only the final byte may be padded with zero bits.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .diagnostics import Diagnostic, truncation_warning
from .errors import EncodingError
from .parser import Instruction


class BitWriter:
    """Append-only bit buffer that fills each byte from its MSB down."""

    def __init__(self):
        self.buffer = bytearray()
        self.cursor = 0  # next free bit in the last byte, 0 = MSB

    def write(self, value: int, bits: int) -> None:
        """Append the low ``bits`` bits of ``value``, most significant first."""
        for i in range(bits - 1, -1, -1):
            if self.cursor == 0:
                self.buffer.append(0)
            bit = (value >> i) & 0x1
            self.buffer[-1] |= bit << (7 - self.cursor)
            self.cursor = (self.cursor + 1) % 8

    @property
    def bit_count(self) -> int:
        if self.cursor == 0:
            return len(self.buffer) * 8
        return (len(self.buffer) - 1) * 8 + self.cursor

    def getvalue(self) -> bytes:
        return bytes(self.buffer)


@dataclass
class EncodeResult:
    """Packed output plus the non-fatal diagnostics raised while encoding."""

    data: bytes
    bit_count: int
    warnings: List[Diagnostic] = field(default_factory=list)


def check_field_width(value: int, bits: int) -> Tuple[int, bool]:
    """
    Fit a value into a field of the given width.

    Args:
        value: The operand value
        bits: Width of the encoded field

    Returns:
        Tuple of (masked value, True if high bits were dropped)
    """
    mask = (1 << bits) - 1
    return value & mask, (value & mask) != value


def instruction_fields(instr: Instruction) -> List[Tuple[int, int]]:
    """
    Get the (value, width) sequence for one instruction, prefix first.

    Values are the raw operand values, not yet fitted to their widths.
    """
    definition = instr.definition
    fields = [(definition.prefix, definition.prefix_bits)]
    for name, bits in definition.fields:
        fields.append((getattr(instr, name), bits))
    return fields


def instruction_word(instr: Instruction) -> int:
    """
    Encode one instruction as its 12-bit program word.

    Oversized operands are truncated silently; this is for listings.
    """
    word = 0
    for value, bits in instruction_fields(instr):
        word = (word << bits) | check_field_width(value, bits)[0]
    return word


def encode_instruction(
    writer: BitWriter,
    instr: Instruction,
    line_num: Optional[int] = None,
    strict: bool = False,
) -> List[Diagnostic]:
    """
    Append one instruction to the bit-stream.

    Args:
        writer: Destination buffer
        instr: Parsed instruction
        line_num: Source line for diagnostics (defaults to instr.line_num)
        strict: Raise instead of warning when a value is truncated

    Returns:
        Truncation warnings for this instruction
    """
    if line_num is None:
        line_num = instr.line_num

    warnings = []
    for value, bits in instruction_fields(instr):
        masked, truncated = check_field_width(value, bits)
        if truncated:
            diagnostic = truncation_warning(value, bits, line_num)
            if strict:
                raise EncodingError(diagnostic.message, line_num)
            warnings.append(diagnostic)
        writer.write(masked, bits)
    return warnings


def encode(
    instructions: Sequence[Instruction],
    line_numbers: Optional[Sequence[int]] = None,
    strict: bool = False,
) -> EncodeResult:
    """
    Encode an instruction list into packed bytes.

    Args:
        instructions: Instructions in program order
        line_numbers: Source lines parallel to ``instructions``
        strict: Treat truncation as a fatal EncodingError

    Returns:
        EncodeResult with the packed bytes and any truncation warnings
    """
    writer = BitWriter()
    warnings: List[Diagnostic] = []

    for i, instr in enumerate(instructions):
        line_num = line_numbers[i] if line_numbers is not None else None
        warnings.extend(encode_instruction(writer, instr, line_num, strict))

    return EncodeResult(
        data=writer.getvalue(), bit_count=writer.bit_count, warnings=warnings
    )


def format_byte(value: int) -> str:
    """Render a byte as two 4-bit binary groups, e.g. '1100 0011'."""
    bits = format(value & 0xFF, "08b")
    return f"{bits[:4]} {bits[4:]}"


def format_binary(data: bytes) -> str:
    """Render packed output for the console, one byte after another."""
    return " ".join(format_byte(value) for value in data)
