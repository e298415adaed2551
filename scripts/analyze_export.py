#!/usr/bin/env python3
"""
Export Analysis Utility
Summarizes a Squarespace export before converting it to a Shopify CSV.
"""

import sys
import argparse
import json
from pathlib import Path
from loguru import logger
from colorama import init, Fore
import pandas as pd

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqsp_to_shopify.errors import ConversionError, TooManyVariantOptionsError
from sqsp_to_shopify.mapper import ProductMapper
from sqsp_to_shopify.squarespace import load_catalog


def analyze_catalog(catalog) -> dict:
    """Collect per product counts and the products that cannot be mapped."""
    mapper = ProductMapper()
    records = []
    blocked = []

    for product in catalog.products:
        records.append({
            'id': product.id,
            'handle': product.handle,
            'name': product.name,
            'images': len(product.images),
            'variants': len(product.variants),
            'rows': max(len(product.images), len(product.variants), 1),
        })
        for variant in product.variants:
            try:
                mapper.ordered_options(product, variant)
            except TooManyVariantOptionsError as e:
                blocked.append({'id': product.id, 'name': product.name, 'attributes': e.attributes})
                break

    df = pd.DataFrame(records, columns=['id', 'handle', 'name', 'images', 'variants', 'rows'])
    return {
        'product_count': len(df),
        'expected_rows': int(df['rows'].sum()) if len(df) else 0,
        'has_next_page': catalog.has_next_page,
        # Plain dicts keep the counts as Python ints for json.dump
        'products': records,
        'too_many_options': blocked,
    }


def main():
    """Main analysis function."""
    parser = argparse.ArgumentParser(
        description='Analyze a Squarespace product export'
    )
    parser.add_argument(
        'export_file',
        type=str,
        help='Path to Squarespace JSON export'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Output JSON file for analysis results'
    )

    args = parser.parse_args()

    # Initialize colorama
    init(autoreset=True)

    # Setup logging
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="INFO"
    )

    export_path = Path(args.export_file)

    if not export_path.exists():
        print(Fore.RED + f"ERROR: Export file not found: {export_path}")
        sys.exit(1)

    print(Fore.CYAN + "=" * 60)
    print(Fore.CYAN + "SQUARESPACE EXPORT ANALYSIS")
    print(Fore.CYAN + "=" * 60)
    print(f"File: {export_path}")
    print()

    try:
        analysis = analyze_catalog(load_catalog(str(export_path)))
    except ConversionError as e:
        print(Fore.RED + f"✗ Analysis failed: {e}")
        sys.exit(1)

    print(Fore.GREEN + "✓ Analysis Complete")
    print()
    print(Fore.YELLOW + "Summary:")
    print(f"  Products: {analysis['product_count']}")
    print(f"  Expected CSV rows: {analysis['expected_rows']}")
    if analysis['has_next_page']:
        print(Fore.YELLOW + "  Export has more pages; only this page will be converted")
    print()

    print(Fore.YELLOW + "Products:")
    for product in analysis['products']:
        print(f"  {product['handle']}: {product['images']} images, "
              f"{product['variants']} variants -> {product['rows']} rows")
    print()

    if analysis['too_many_options']:
        print(Fore.RED + "Products with more than 3 variant options (conversion will fail):")
        for product in analysis['too_many_options']:
            print(Fore.RED + f"  {product['id']} ({product['name']}): {', '.join(product['attributes'])}")
    else:
        print(Fore.GREEN + "✓ All products fit Shopify's 3 option limit")

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(analysis, f, indent=2, default=str)
        print(Fore.GREEN + f"\n✓ Analysis saved to: {args.output}")


if __name__ == '__main__':
    main()
