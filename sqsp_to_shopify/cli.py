"""
Command Line Interface
Converts a Squarespace product export (JSON) into a Shopify product import CSV.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console
from loguru import logger

from .config import default_config_path, load_config, resolve_settings
from .converter import CatalogConverter
from .csv_handler import STDOUT
from .errors import ConversionError

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sqsp-to-shopify',
        description='Convert a Squarespace product export (JSON) to a Shopify product CSV'
    )
    parser.add_argument(
        'input',
        nargs='?',
        type=str,
        help='Path to Squarespace JSON export (default: $SQUARESPACE_EXPORT_PATH or files.input)'
    )
    parser.add_argument(
        '-o', '--output',
        type=str,
        help='Output CSV file path, "-" for stdout (default: stdout)'
    )
    parser.add_argument(
        '--encoding',
        type=str,
        help='Output file encoding (default: utf-8)'
    )
    parser.add_argument(
        '--atomic',
        action='store_true',
        help='Write to a temporary file and replace the output only on success'
    )
    parser.add_argument(
        '--validate',
        action='store_true',
        help='Log warnings for suspicious catalog data and rows'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show verbose logging to stderr'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Hide the banner and progress bar'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration YAML file'
    )
    return parser


def setup_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)


def echo(message: str, color: str = "") -> None:
    # stdout may carry the CSV, so operator messages always go to stderr
    print(color + message + (Style.RESET_ALL if color else ""), file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main conversion function."""
    just_fix_windows_console()

    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging('DEBUG' if args.verbose else 'INFO')

    # A missing default config is normal for an installed package
    if args.config:
        config = load_config(args.config)
    else:
        config = load_config(default_config_path(), warn_missing=False)
    settings = resolve_settings(args, config)
    setup_logging(settings['log_level'])

    if not settings['input']:
        parser.error("Must have exactly one argument (input filename)")

    input_path = Path(settings['input'])
    if not input_path.exists():
        echo(f"ERROR: Input file not found: {input_path}", Fore.RED)
        return 1

    to_stdout = settings['output'] == STDOUT
    if not args.quiet:
        echo("=" * 60, Fore.CYAN)
        echo("SQUARESPACE TO SHOPIFY CONVERSION", Fore.CYAN)
        echo("=" * 60, Fore.CYAN)
        echo(f"Input: {input_path}")
        echo(f"Output: {'<stdout>' if to_stdout else settings['output']}")
        echo(f"Atomic: {settings['atomic'] and not to_stdout}")
        echo("=" * 60, Fore.CYAN)

    converter = CatalogConverter(
        input_path=str(input_path),
        output_path=settings['output'],
        encoding=settings['encoding'],
        atomic=settings['atomic'],
        validate=settings['validate'],
        show_progress=not (args.quiet or to_stdout)
    )

    try:
        report = converter.convert()
    except ConversionError as e:
        logger.error(f"Conversion failed: {e}")
        echo(f"ERROR converting files: {e}", Fore.RED)
        return 1

    if not args.quiet:
        echo(f"✓ Done. {report['products']} products, {report['rows']} rows written", Fore.GREEN)
        if report['warnings']:
            echo(f"  {len(report['warnings'])} warnings (see log)", Fore.YELLOW)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run()
