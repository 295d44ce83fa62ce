#!/usr/bin/env python3
"""
PIC12 Assembler - Command Line Interface

Usage:
    python3 -m pic12_asm input.asm
    python3 -m pic12_asm input.asm -o build/input.bin -v
    python3 -m pic12_asm input.asm --listing --no-echo
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .assembler import Assembler, default_output_path
from .config import AssemblerConfig, load_config
from .errors import AssemblerError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pic12-asm",
        description="Baseline PIC (12-bit core) Assembler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s programs/blink.asm
  %(prog)s programs/blink.asm -o build/blink.bin -v
  %(prog)s programs/blink.asm --listing --no-echo
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Input assembly file (.asm)",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Output binary file. Defaults to <input-base-name>.bin next to the input.",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        help="YAML configuration file",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "-l",
        "--listing",
        action="store_true",
        help="Print assembly listing",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat operands too wide for their field as errors",
    )

    parser.add_argument(
        "--no-echo",
        action="store_true",
        help="Do not print the packed output as binary",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def resolve_config(args: argparse.Namespace) -> AssemblerConfig:
    """Load the configuration file, if any, and apply command line overrides."""
    config = load_config(args.config) if args.config else AssemblerConfig()
    if args.verbose:
        config.verbose = True
    if args.listing:
        config.listing = True
    if args.strict:
        config.strict = True
    if args.no_echo:
        config.echo = False
    return config


def main(argv=None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    if not argv:
        parser.print_usage(sys.stdout)
        return 1

    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except AssemblerError as e:
        print(e, file=sys.stderr)
        return 1

    # Validate input file
    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    # Determine output path
    if args.output:
        output_path = args.output
    else:
        output_path = default_output_path(
            str(input_path), config.output_suffix, config.output_dir
        )

    asm = Assembler(verbose=config.verbose, strict=config.strict)
    try:
        asm.assemble_file(str(input_path), output_path)

    except AssemblerError as e:
        print(e, file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if config.verbose:
            import traceback

            traceback.print_exc()
        return 1

    for warning in asm.warnings:
        print(warning, file=sys.stderr)

    if config.echo:
        print(asm.get_binary_string())

    if config.listing:
        print("\n" + asm.get_listing())

    print(
        f"\nAssembly successful: {len(asm.parse_output.instructions)} instructions, "
        f"{len(asm.data)} bytes -> {output_path}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
