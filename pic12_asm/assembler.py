"""
Main assembler implementation.

Single-pass assembler for baseline PIC assembly to a packed binary stream.
"""

from typing import Dict, List, Optional
from pathlib import Path

from .parser import Parser, ParseOutput
from .encoder import encode, format_binary, format_byte, instruction_word
from .diagnostics import Diagnostic


def default_output_path(
    input_path: str, suffix: str = ".bin", output_dir: Optional[str] = None
) -> str:
    """
    Build the output path for an input file.

    The output is named after the input's base name and, unless
    ``output_dir`` is given, placed next to it: ``src/blink.asm`` becomes
    ``src/blink.bin``.
    """
    path = Path(input_path)
    directory = Path(output_dir) if output_dir else path.parent
    return str(directory / (path.stem + suffix))


class Assembler:
    """
    Baseline PIC assembler.

    Parse: tokenize the source, collect labels and instructions
    Encode: pack every instruction into the output bit-stream
    """

    def __init__(self, verbose: bool = False, strict: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: If True, print detailed assembly information
            strict: If True, an operand too wide for its field is an error
        """
        self.verbose = verbose
        self.strict = strict
        self.parser = Parser()
        self.parse_output = ParseOutput()
        self.data: bytes = b""
        self.bit_count: int = 0
        self.warnings: List[Diagnostic] = []

    def log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    def assemble_file(self, input_path: str, output_path: str = None) -> bytes:
        """
        Assemble an assembly file to binary output.

        Args:
            input_path: Path to input .asm file
            output_path: Path to output .bin file (optional)

        Returns:
            Packed program bytes
        """
        self.log(f"Assembling: {input_path}")
        parse_output = self.parser.parse_file(input_path)
        self._assemble(parse_output)

        if output_path:
            self.write_bin(output_path)
            self.log(f"Output written to: {output_path}")

        return self.data

    def assemble_string(self, source: str) -> bytes:
        """
        Assemble from a string.

        Args:
            source: Assembly source code

        Returns:
            Packed program bytes
        """
        parse_output = self.parser.parse_string(source)
        self._assemble(parse_output)
        return self.data

    def _assemble(self, parse_output: ParseOutput) -> None:
        self.parse_output = parse_output
        self.data = b""
        self.bit_count = 0
        self.warnings = []

        self._log_parse(parse_output)
        self._encode(parse_output)

    def _log_parse(self, parse_output: ParseOutput) -> None:
        self.log("\n=== Parse: labels and instructions ===")
        for name, target in zip(parse_output.labels, parse_output.label_targets):
            self.log(f"  Label '{name}' before instruction {target}")
        self.log(f"  Total labels: {len(parse_output.labels)}")
        self.log(f"  Total instructions: {len(parse_output.instructions)}")

    def _encode(self, parse_output: ParseOutput) -> None:
        self.log("\n=== Encode: packing instructions ===")
        result = encode(
            parse_output.instructions, parse_output.line_numbers, strict=self.strict
        )
        self.data = result.data
        self.bit_count = result.bit_count
        self.warnings = result.warnings

        for warning in self.warnings:
            self.log(f"  {warning}")
        self.log(f"  Packed {self.bit_count} bits into {len(self.data)} bytes")

    def write_bin(self, output_path: str) -> None:
        """
        Write the packed program to a raw binary file.

        Args:
            output_path: Path to output file
        """
        with open(output_path, "wb") as f:
            f.write(self.data)

    def get_binary_string(self) -> str:
        """
        Get the packed program as 4-bit binary groups.

        Returns:
            String with every byte shown as two nibbles
        """
        return format_binary(self.data)

    def get_hex_string(self) -> str:
        """Get the packed program as space separated hex bytes."""
        return " ".join(f"{value:02x}" for value in self.data)

    def get_listing_rows(self) -> List[Dict]:
        """
        Get one row per instruction with its 12-bit word and labels.

        Returns:
            List of dicts with index, line, word, labels and source
        """
        labels_at: Dict[int, List[str]] = {}
        for name, target in zip(self.parse_output.labels, self.parse_output.label_targets):
            labels_at.setdefault(target, []).append(name)

        rows = []
        for index, instr in enumerate(self.parse_output.instructions):
            rows.append({
                "index": index,
                "line": self.parse_output.line_numbers[index],
                "word": instruction_word(instr),
                "labels": labels_at.get(index, []),
                "source": str(instr),
            })
        return rows

    def get_listing(self) -> str:
        """
        Get an assembly listing showing indices, program words, and source.

        Returns:
            Formatted listing string
        """
        lines = []
        lines.append("Index  Line   Word   Bits             Source")
        lines.append("-" * 60)

        for row in self.get_listing_rows():
            for name in row["labels"]:
                lines.append(f"{'':38}{name}:")
            word = row["word"]
            bits = f"{format_byte(word >> 4)} {word & 0xF:04b}"
            lines.append(
                f"{row['index']:04d}   {row['line']:<5d}  0x{word:03X}  {bits}   {row['source']}"
            )

        count = len(self.parse_output.instructions)
        for name, target in zip(self.parse_output.labels, self.parse_output.label_targets):
            if target == count:
                lines.append(f"{'':38}{name}:")

        return "\n".join(lines)
