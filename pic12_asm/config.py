"""
Assembler configuration.

Parses and validates YAML configuration files. Every key is optional:

    echo: true            # print the packed output as binary groups
    verbose: false        # print pass-by-pass progress
    listing: false        # print an instruction listing
    strict: false         # treat truncated operands as errors
    output_dir: null      # write the .bin here instead of next to the input
    output_suffix: .bin   # extension of the output file
"""

from dataclasses import dataclass, fields
from typing import Any, Optional

import yaml

from .errors import ConfigError


@dataclass
class AssemblerConfig:
    """Settings shared by the command line and web front ends."""

    echo: bool = True
    verbose: bool = False
    listing: bool = False
    strict: bool = False
    output_dir: Optional[str] = None
    output_suffix: str = ".bin"


BOOL_KEYS = {"echo", "verbose", "listing", "strict"}
VALID_KEYS = {f.name for f in fields(AssemblerConfig)}


def parse_config(yaml_content: str) -> AssemblerConfig:
    """
    Parse and validate a YAML configuration document.

    Args:
        yaml_content: Raw YAML string content

    Returns:
        AssemblerConfig with defaults filled in for missing keys

    Raises:
        ConfigError: If the configuration is invalid
    """
    try:
        raw = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if raw is None:
        return AssemblerConfig()

    if not isinstance(raw, dict):
        raise ConfigError("Configuration must be a YAML mapping/dictionary")

    _validate_config(raw)
    return AssemblerConfig(**raw)


def _validate_config(raw: dict) -> None:
    """Validate configuration keys and value types."""
    for key in raw:
        if key not in VALID_KEYS:
            raise ConfigError(f"Unknown configuration key '{key}'")

    for key in BOOL_KEYS & raw.keys():
        _require_bool(raw[key], key)

    if raw.get("output_dir") is not None:
        _require_string(raw["output_dir"], "output_dir")

    if "output_suffix" in raw:
        suffix = raw["output_suffix"]
        _require_string(suffix, "output_suffix")
        if not suffix.startswith(".") or len(suffix) < 2:
            raise ConfigError("output_suffix must start with '.', e.g. '.bin'")


def _require_bool(value: Any, field_path: str) -> None:
    """Validate that a value is a boolean."""
    if not isinstance(value, bool):
        raise ConfigError(f"{field_path} must be true or false")


def _require_string(value: Any, field_path: str) -> None:
    """Validate that a value is a non-empty string."""
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{field_path} must be a non-empty string")


def load_config(path: str) -> AssemblerConfig:
    """
    Load a configuration file.

    Raises:
        ConfigError: If the file cannot be read or is invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e.strerror}")
    return parse_config(content)
