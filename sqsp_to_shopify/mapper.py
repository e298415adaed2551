"""
Product Mapper Module
Flattens a Squarespace product into one or more Shopify CSV rows.
"""

from typing import Dict, List, Tuple

from loguru import logger

from .errors import TooManyVariantOptionsError
from .field_schema import MAX_OPTIONS, Row, empty_row, option_fields, set_field
from .squarespace import Product, Variant

INVENTORY_TRACKER = "shopify"
INVENTORY_POLICY = "deny"
FULFILLMENT_SERVICE = "manual"


class ProductMapper:
    """Map Squarespace products to Shopify rows."""

    def __init__(self, max_options: int = MAX_OPTIONS):
        """
        Initialize product mapper.

        Args:
            max_options: Number of Shopify option slots (Option1..OptionN)
        """
        self.max_options = max_options

    def map_product(self, product: Product) -> List[Row]:
        """
        Map a product to Shopify rows.

        The first row carries the product level fields. Row ``i`` gets image
        ``i`` and variant ``i`` when they exist, so a product produces
        ``max(len(images), len(variants), 1)`` rows, all sharing the handle.

        Args:
            product: Product to map

        Returns:
            List of rows, in order

        Raises:
            TooManyVariantOptionsError: If a variant has more attributes than option slots
        """
        handle = product.handle
        rows = []

        extra_rows = max(len(product.images), len(product.variants), 1)
        for i in range(extra_rows):
            if i == 0:
                row = self._base_row(product)
            else:
                # Following rows only repeat the handle; Shopify treats them as
                # additional images/variants of the same product
                row = empty_row()
                set_field(row, "Handle", handle)

            if i < len(product.images):
                set_field(row, "Image Src", product.images[i].url)

            if i < len(product.variants):
                self._set_variant(row, product, product.variants[i])

            rows.append(row)

        logger.debug(
            f"Mapped {product} to {len(rows)} rows "
            f"({len(product.images)} images, {len(product.variants)} variants)"
        )
        return rows

    def _base_row(self, product: Product) -> Row:
        row = empty_row()
        set_field(row, "Handle", product.handle)
        set_field(row, "Title", product.name)
        set_field(row, "Body (HTML)", product.description)
        # Categories first, then tags
        set_field(row, "Tags", ",".join(product.categories + product.tags))
        return row

    def _set_variant(self, row: Row, product: Product, variant: Variant) -> None:
        set_field(row, "Variant Inventory Tracker", INVENTORY_TRACKER)
        set_field(row, "Variant Inventory Policy", INVENTORY_POLICY)
        set_field(row, "Variant Fulfillment Service", FULFILLMENT_SERVICE)

        set_field(row, "Variant Price", variant.price)
        set_field(row, "Variant SKU", variant.sku)
        set_field(row, "Variant Inventory Qty", str(variant.quantity))

        for position, (name, value) in enumerate(self.ordered_options(product, variant), 1):
            name_field, value_field = option_fields(position)
            set_field(row, name_field, name)
            set_field(row, value_field, value)

    def ordered_options(self, product: Product, variant: Variant) -> List[Tuple[str, str]]:
        """
        Return the variant's attributes in option order.

        Attributes named in the product's ``variantAttributeNames`` come first,
        in that order; any others follow in document order.

        Raises:
            TooManyVariantOptionsError: If there are more attributes than option slots
        """
        attributes: Dict[str, str] = variant.attributes
        ordered = list(dict.fromkeys(
            name for name in product.variant_attribute_names if name in attributes
        ))
        ordered += [name for name in attributes if name not in ordered]

        if len(ordered) > self.max_options:
            logger.error(f"Too many variant options for {product}: {ordered}")
            raise TooManyVariantOptionsError(product.id, product.name, ordered, self.max_options)

        return [(name, attributes[name]) for name in ordered]
