"""
Assembly source file parser.

Handles tokenization, comment stripping, hexadecimal literals, label
extraction, and instruction parsing. Parsing is a single top-to-bottom
pass over the token sequence; the first error aborts it.
"""

import re
from typing import Dict, List, Tuple
from dataclasses import dataclass, field

from .errors import MalformedLiteralError, MissingOperandError, UnknownMnemonicError
from .instructions import InstructionDef, get_instruction

COMMENT_CHAR = ";"
LABEL_SUFFIX = ":"

HEX_LITERAL_RE = re.compile(r"0x([0-9a-fA-F]+)")


@dataclass(frozen=True)
class Token:
    """
    A whitespace-delimited run of source text.

    Attributes:
        text: Token characters
        line_num: 1-based line the token starts on
    """

    text: str
    line_num: int

    @property
    def is_label(self) -> bool:
        return self.text.endswith(LABEL_SUFFIX)


@dataclass(frozen=True)
class Instruction:
    """
    A parsed instruction.

    Only the fields used by the opcode's operand shape are meaningful;
    the others stay 0.

    Attributes:
        opcode: Canonical upper-case mnemonic
        f: Register file address
        d: Destination flag
        k: Literal or jump/call target
        b: Bit index
        line_num: Line of the mnemonic token
    """

    opcode: str
    f: int = 0
    d: int = 0
    k: int = 0
    b: int = 0
    line_num: int = 0

    @property
    def definition(self) -> InstructionDef:
        return get_instruction(self.opcode)

    def operand_values(self) -> List[int]:
        """Operand values in source order."""
        return [getattr(self, name) for name in self.definition.operands]

    def __str__(self) -> str:
        operands = ", ".join(f"0x{value:02x}" for value in self.operand_values())
        return f"{self.opcode} {operands}".rstrip()


@dataclass
class ParseOutput:
    """
    Result of parsing a source file.

    ``line_numbers`` runs parallel to ``instructions``. Each entry of
    ``label_targets`` is the index of the instruction that follows the
    label at the point it was declared.
    """

    instructions: List[Instruction] = field(default_factory=list)
    line_numbers: List[int] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    label_targets: List[int] = field(default_factory=list)

    def add_instruction(self, instr: Instruction) -> None:
        self.instructions.append(instr)
        self.line_numbers.append(instr.line_num)

    def add_label(self, name: str) -> None:
        self.labels.append(name)
        self.label_targets.append(len(self.instructions))

    @property
    def symbols(self) -> Dict[str, int]:
        """Label name to target index; a redeclared label keeps its last target."""
        return dict(zip(self.labels, self.label_targets))


def strip_comment(line: str) -> str:
    """Remove a ';' comment from a single line."""
    comment_pos = line.find(COMMENT_CHAR)
    if comment_pos >= 0:
        return line[:comment_pos]
    return line


def tokenize(content: str) -> List[Token]:
    """
    Split source text into line-tagged tokens.

    Comments run from ';' to the end of the line. Only '\\n' advances the
    line counter; every other whitespace character is just a separator.

    Returns:
        Tokens in source order
    """
    tokens = []
    for line_num, line in enumerate(content.split("\n"), start=1):
        for text in strip_comment(line).split():
            tokens.append(Token(text, line_num))
    return tokens


def parse_literal(token: str) -> int:
    """
    Parse a hexadecimal literal of the form 0xNN.

    The prefix must be exactly '0x'; the digits are case-insensitive.
    Decimal, binary and signed forms are rejected.

    Returns:
        Unsigned integer value

    Raises:
        MalformedLiteralError: If the token is not a hexadecimal literal
    """
    match = HEX_LITERAL_RE.fullmatch(token)
    if not match:
        raise MalformedLiteralError(f"Invalid hexadecimal literal: {token}")
    return int(match.group(1), 16)


class Parser:
    """
    Assembly parser.

    Turns source text into a ParseOutput. Errors are raised as ParseError
    subclasses tagged with the offending line.
    """

    def __init__(self):
        self.tokens: List[Token] = []
        self.output = ParseOutput()

    def parse_file(self, filepath: str) -> ParseOutput:
        """
        Parse an assembly file.

        Args:
            filepath: Path to the assembly file

        Returns:
            ParseOutput for the whole file
        """
        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()
        return self.parse_string(content)

    def parse_string(self, content: str) -> ParseOutput:
        """
        Parse assembly source from a string.

        Args:
            content: Assembly source code string

        Returns:
            ParseOutput with instructions and labels in source order
        """
        self.tokens = tokenize(content)
        self.output = ParseOutput()

        cursor = 0
        while cursor < len(self.tokens):
            token = self.tokens[cursor]
            cursor += 1

            if token.is_label:
                self.output.add_label(token.text[: -len(LABEL_SUFFIX)])
                continue

            definition = get_instruction(token.text)
            if definition is None:
                raise UnknownMnemonicError(
                    f"Instruction not implemented: {token.text.upper()}",
                    token.line_num,
                )

            values = {}
            for name in definition.operands:
                values[name], cursor = self._expect_number(cursor)

            self.output.add_instruction(
                Instruction(opcode=definition.name, line_num=token.line_num, **values)
            )

        return self.output

    def _expect_number(self, cursor: int) -> Tuple[int, int]:
        """
        Read the numeric operand at ``cursor``.

        Returns:
            Tuple of (value, next cursor)
        """
        if cursor >= len(self.tokens):
            # Report at the last token read, i.e. the instruction missing its operand
            raise MissingOperandError(
                "Expected number, got EOF", self.tokens[cursor - 1].line_num
            )

        token = self.tokens[cursor]
        try:
            value = parse_literal(token.text)
        except MalformedLiteralError as e:
            raise MalformedLiteralError(
                f"Expected number, got: {token.text}", token.line_num
            ) from e
        return value, cursor + 1
