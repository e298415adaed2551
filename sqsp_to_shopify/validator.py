"""
Data Validator Module
Advisory checks on the decoded catalog and on mapped Shopify rows.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import pandas as pd
from loguru import logger

from .field_schema import Row, get_field
from .squarespace import Catalog

URL_PATTERN = re.compile(
    r'^https?://'
    r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,63}\.?|'
    r'localhost|'
    r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'
    r'(?::\d+)?'
    r'(?:/?|[/?]\S+)$', re.IGNORECASE)


class DataValidator:
    """Validate data before and after mapping. Findings are warnings only."""

    def __init__(self):
        self.warnings: List[str] = []

    def validate_catalog(self, catalog: Catalog) -> List[str]:
        """
        Validate a decoded catalog.

        Args:
            catalog: Decoded Squarespace catalog

        Returns:
            List of warnings
        """
        warnings = []

        if catalog.has_next_page:
            warnings.append("Export has more pages (hasNextPage); only this page is converted")

        for position, product in enumerate(catalog.products):
            if not product.handle.strip():
                warnings.append(f"Product {position} ({product.id}): Empty handle")

        for handle, ids in self.duplicate_handles(catalog).items():
            warnings.append(f"Handle '{handle}' is shared by products: {', '.join(ids)}")

        self._record(warnings)
        return warnings

    def duplicate_handles(self, catalog: Catalog) -> Dict[str, List[str]]:
        """
        Find handles used by more than one product.

        Args:
            catalog: Decoded Squarespace catalog

        Returns:
            Mapping of handle to the ids of the products using it
        """
        if not catalog.products:
            return {}

        df = pd.DataFrame(
            [{'handle': p.handle, 'id': p.id} for p in catalog.products if p.handle]
        )
        if df.empty:
            return {}

        duplicates = df[df.duplicated(subset=['handle'], keep=False)]
        return {
            handle: group['id'].tolist()
            for handle, group in duplicates.groupby('handle', sort=False)
        }

    def validate_row(self, row: Row, row_number: int) -> List[str]:
        """
        Validate a mapped Shopify row.

        Args:
            row: Shopify row
            row_number: Row number for reporting (1-based, header excluded)

        Returns:
            List of warnings
        """
        warnings = []

        if not get_field(row, "Handle").strip():
            warnings.append(f"Row {row_number}: Missing handle")

        price = get_field(row, "Variant Price")
        if price and not self._is_valid_price(price):
            warnings.append(f"Row {row_number}: Invalid price format in 'Variant Price': {price}")

        qty = get_field(row, "Variant Inventory Qty")
        if qty and not self._is_valid_inventory(qty):
            warnings.append(f"Row {row_number}: Invalid inventory in 'Variant Inventory Qty': {qty}")

        image = get_field(row, "Image Src")
        if image and not URL_PATTERN.match(image):
            warnings.append(f"Row {row_number}: Invalid image URL in 'Image Src': {image}")

        self._record(warnings)
        return warnings

    def _is_valid_price(self, value: str) -> bool:
        try:
            return Decimal(value) >= 0
        except InvalidOperation:
            return False

    def _is_valid_inventory(self, value: str) -> bool:
        try:
            int(value)
            return True
        except ValueError:
            return False

    def _record(self, warnings: List[str]) -> None:
        for warning in warnings:
            logger.warning(warning)
        self.warnings.extend(warnings)

    def generate_report(self) -> Dict[str, Any]:
        """Return a summary of the collected warnings."""
        return {
            'total_warnings': len(self.warnings),
            'warnings': list(self.warnings),
        }
