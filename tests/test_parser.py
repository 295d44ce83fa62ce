"""
Tests for the tokenizer, literal parser and instruction parser.
"""

import pytest

from pic12_asm.errors import (
    MalformedLiteralError,
    MissingOperandError,
    ParseError,
    UnknownMnemonicError,
)
from pic12_asm.parser import Instruction, Parser, Token, parse_literal, tokenize


def texts(tokens):
    return [(t.text, t.line_num) for t in tokens]


class TestParseLiteral:
    """Tests for parse_literal."""

    @pytest.mark.parametrize("token,expected", [
        ("0x0", 0),
        ("0x3A", 0x3A),
        ("0x3a", 0x3A),
        ("0xFF", 255),
        ("0x001", 1),
        ("0x1ff", 0x1FF),
        ("0xdeadBEEF", 0xDEADBEEF),
    ])
    def test_valid_literals(self, token, expected):
        """Test that 0x followed by hex digits parses in any digit case."""
        assert parse_literal(token) == expected

    @pytest.mark.parametrize("token", [
        "",
        "0",
        "0x",
        "3A",
        "x3A",
        "0X3A",
        "58",
        "0b1010",
        "0x3G",
        "-0x1",
        "0x3A:",
        "00x1",
    ])
    def test_malformed_literals(self, token):
        """Test that anything not shaped 0x + hex digits is rejected."""
        with pytest.raises(MalformedLiteralError):
            parse_literal(token)

    def test_malformed_literal_is_parse_error(self):
        """Test that literal errors belong to the parse error family."""
        with pytest.raises(ParseError):
            parse_literal("12")


class TestTokenize:
    """Tests for tokenize."""

    def test_empty_input(self):
        assert tokenize("") == []

    def test_tokens_are_line_tagged(self):
        """Test that tokens carry the line they start on."""
        tokens = tokenize("MOVLW 0x3A\nGOTO 0x001\n")
        assert texts(tokens) == [
            ("MOVLW", 1), ("0x3A", 1), ("GOTO", 2), ("0x001", 2),
        ]

    def test_comment_at_end_of_line(self):
        tokens = tokenize("MOVLW 0x01 ; load one\nNOP")
        assert texts(tokens) == [("MOVLW", 1), ("0x01", 1), ("NOP", 2)]

    def test_comment_adjacent_to_code(self):
        """Test that a comment ends a token without a separating space."""
        tokens = tokenize("NOP;no space\nCLRW")
        assert texts(tokens) == [("NOP", 1), ("CLRW", 2)]

    def test_full_line_and_blank_lines(self):
        """Test that comments and blank lines still advance the line count."""
        tokens = tokenize("; header\n\n   \n  CLRW ; trailing")
        assert texts(tokens) == [("CLRW", 4)]

    def test_comment_without_trailing_newline(self):
        assert texts(tokenize("SLEEP ; the end")) == [("SLEEP", 1)]

    def test_comment_hides_labels_and_mnemonics(self):
        assert tokenize("; loop: MOVLW 0x01") == []

    def test_tabs_and_carriage_returns_separate(self):
        """Test that only newlines count lines; other whitespace separates."""
        tokens = tokenize("MOVLW\t0x01\r\nNOP  \t CLRW")
        assert texts(tokens) == [("MOVLW", 1), ("0x01", 1), ("NOP", 2), ("CLRW", 2)]

    def test_label_token(self):
        tokens = tokenize("loop: NOP")
        assert tokens[0] == Token("loop:", 1)
        assert tokens[0].is_label
        assert not tokens[1].is_label

    def test_input_is_not_modified(self):
        source = "MOVLW 0x01 ; comment"
        tokenize(source)
        assert source == "MOVLW 0x01 ; comment"


class TestParser:
    """Tests for Parser.parse_string."""

    def test_mnemonics_are_case_insensitive(self):
        output = Parser().parse_string("movlw 0x01\nNop\nClrW")
        assert [i.opcode for i in output.instructions] == ["MOVLW", "NOP", "CLRW"]

    def test_byte_oriented_operands(self):
        """Test that byte-oriented ops read f then d."""
        output = Parser().parse_string("ADDWF 0x07 0x01")
        assert output.instructions == [Instruction("ADDWF", f=7, d=1, line_num=1)]

    def test_bit_oriented_operands(self):
        """Test that bit-oriented ops read f then b."""
        output = Parser().parse_string("BSF 0x06 0x03")
        assert output.instructions == [Instruction("BSF", f=6, b=3, line_num=1)]

    def test_register_and_literal_operands(self):
        output = Parser().parse_string("CLRF 0x10\nMOVLW 0xAA\nTRIS 0x06\nGOTO 0x1FF")
        instrs = output.instructions
        assert instrs[0] == Instruction("CLRF", f=0x10, line_num=1)
        assert instrs[1] == Instruction("MOVLW", k=0xAA, line_num=2)
        assert instrs[2] == Instruction("TRIS", f=6, line_num=3)
        assert instrs[3] == Instruction("GOTO", k=0x1FF, line_num=4)

    def test_operands_may_span_lines(self):
        """Test that operands are taken from the token stream, not the line."""
        output = Parser().parse_string("ADDWF\n0x01\n0x00\nNOP")
        assert output.instructions[0] == Instruction("ADDWF", f=1, d=0, line_num=1)
        assert output.line_numbers == [1, 4]

    def test_line_numbers_parallel_instructions(self):
        output = Parser().parse_string("; start\nNOP\n\nMOVLW 0x01\nSLEEP")
        assert output.line_numbers == [2, 4, 5]
        assert [i.line_num for i in output.instructions] == output.line_numbers

    def test_label_targets(self):
        """Test that a label points at the next instruction to be parsed."""
        source = "start:\nNOP\nloop: inner:\nCLRW\nGOTO 0x001\nend:\n"
        output = Parser().parse_string(source)
        assert output.labels == ["start", "loop", "inner", "end"]
        assert output.label_targets == [0, 1, 1, 3]

    def test_label_on_same_line_as_instruction(self):
        output = Parser().parse_string("main: MOVLW 0x05")
        assert output.labels == ["main"]
        assert output.label_targets == [0]
        assert len(output.instructions) == 1

    def test_duplicate_labels_are_recorded(self):
        output = Parser().parse_string("a:\nNOP\na:\nNOP")
        assert output.labels == ["a", "a"]
        assert output.label_targets == [0, 1]
        assert output.symbols == {"a": 1}

    def test_labels_are_not_substituted(self):
        """Test that jump targets stay literal even when a label exists."""
        output = Parser().parse_string("loop:\nNOP\nloop2:\nGOTO 0x000\nCALL 0x05")
        assert output.instructions[1].k == 0
        assert output.instructions[2].k == 5

    def test_unknown_mnemonic(self):
        source = "NOP\nNOP\nNOP\nNOP\nFOOBAR\n"
        with pytest.raises(UnknownMnemonicError, match=r"\[line 5\]") as exc:
            Parser().parse_string(source)
        assert exc.value.line_num == 5
        assert "FOOBAR" in exc.value.message

    def test_unknown_mnemonic_stops_parsing(self):
        """Test that the first error aborts without collecting more."""
        with pytest.raises(UnknownMnemonicError) as exc:
            Parser().parse_string("BOGUS\nALSO_BOGUS")
        assert exc.value.line_num == 1

    def test_missing_operand_at_end_of_input(self):
        """Test that a trailing MOVLW is reported at its own line."""
        with pytest.raises(MissingOperandError, match="Expected number, got EOF") as exc:
            Parser().parse_string("NOP\nMOVLW\n\n; nothing else\n")
        assert exc.value.line_num == 2

    def test_missing_second_operand(self):
        with pytest.raises(MissingOperandError) as exc:
            Parser().parse_string("BCF\n0x06")
        assert exc.value.line_num == 2

    def test_malformed_operand(self):
        with pytest.raises(MalformedLiteralError, match="Expected number, got: 58") as exc:
            Parser().parse_string("NOP\nMOVLW 58")
        assert exc.value.line_num == 2

    def test_label_is_not_an_operand(self):
        with pytest.raises(MalformedLiteralError) as exc:
            Parser().parse_string("GOTO\nloop:")
        assert exc.value.line_num == 2

    def test_instruction_is_not_an_operand(self):
        """Test that a missing operand is not silently skipped."""
        with pytest.raises(MalformedLiteralError, match="got: NOP"):
            Parser().parse_string("MOVWF NOP")

    def test_parser_resets_between_runs(self):
        parser = Parser()
        parser.parse_string("a:\nNOP\nNOP")
        output = parser.parse_string("CLRW")
        assert output.labels == []
        assert len(output.instructions) == 1

    def test_parse_file(self, tmp_path):
        path = tmp_path / "prog.asm"
        path.write_text("MOVLW 0x3A\nGOTO 0x001\n")
        output = Parser().parse_file(str(path))
        assert [str(i) for i in output.instructions] == ["MOVLW 0x3a", "GOTO 0x01"]
