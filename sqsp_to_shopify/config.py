"""
Configuration Module
Loads settings from the YAML config file and the environment.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger

DEFAULT_CONFIG_PATH = "config/config.yaml"

INPUT_ENV = "SQUARESPACE_EXPORT_PATH"
OUTPUT_ENV = "SHOPIFY_OUTPUT_PATH"


def load_config(config_path: str = DEFAULT_CONFIG_PATH, warn_missing: bool = True) -> dict:
    """Load configuration from YAML file. A missing file gives an empty config."""
    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        if warn_missing:
            logger.warning(f"Config file not found: {config_path}")
        return {}


def resolve_settings(args: Any, config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combine command line arguments, environment variables and config file values.

    Arguments win over the environment, which wins over the config file.

    Args:
        args: Parsed command line arguments
        config: Loaded configuration dictionary

    Returns:
        Settings dictionary with input, output, encoding, atomic, validate and log_level
    """
    load_dotenv()

    files = config.get('files') or {}
    output = config.get('output') or {}
    validation = config.get('validation') or {}
    logging = config.get('logging') or {}

    return {
        'input': _first(args.input, os.getenv(INPUT_ENV), files.get('input')),
        'output': _first(args.output, os.getenv(OUTPUT_ENV), files.get('output'), '-'),
        'encoding': _first(args.encoding, output.get('encoding'), 'utf-8'),
        'atomic': bool(args.atomic or output.get('atomic', False)),
        'validate': bool(args.validate or validation.get('enabled', False)),
        'log_level': 'DEBUG' if args.verbose else str(logging.get('level', 'INFO')).upper(),
    }


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value:
            return str(value)
    return None


def default_config_path() -> str:
    """Return the config path relative to the working directory, or the packaged default."""
    if Path(DEFAULT_CONFIG_PATH).exists():
        return DEFAULT_CONFIG_PATH
    return str(Path(__file__).parent.parent / DEFAULT_CONFIG_PATH)
