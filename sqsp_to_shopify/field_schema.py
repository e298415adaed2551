"""
Field Schema Module
The fixed, ordered Shopify product import columns and name based access to a row.
"""

from types import MappingProxyType
from typing import List, Mapping, Tuple

from .errors import UnknownFieldError

Row = List[str]

SHOPIFY_FIELDS: Tuple[str, ...] = (
    "Handle",
    "Title",
    "Body (HTML)",
    "Vendor",
    "Type",
    "Tags",
    "Published",
    "Option1 Name",
    "Option1 Value",
    "Option2 Name",
    "Option2 Value",
    "Option3 Name",
    "Option3 Value",
    "Variant SKU",
    "Variant Grams",
    "Variant Inventory Tracker",
    "Variant Inventory Qty",
    "Variant Inventory Policy",
    "Variant Fulfillment Service",
    "Variant Price",
    "Variant Compare At Price",
    "Variant Requires Shipping",
    "Variant Taxable",
    "Variant Barcode",
    "Image Src",
    "Image Alt Text",
    "Gift Card",
    "Google Shopping / MPN",
    "Google Shopping / Age Group",
    "Google Shopping / Gender",
    "Google Shopping / Google Product Category",
    "SEO Title",
    "SEO Description",
    "Google Shopping / AdWords Grouping",
    "Google Shopping / AdWords Labels",
    "Google Shopping / Condition",
    "Google Shopping / Custom Product",
    "Google Shopping / Custom Label 0",
    "Google Shopping / Custom Label 1",
    "Google Shopping / Custom Label 2",
    "Google Shopping / Custom Label 3",
    "Google Shopping / Custom Label 4",
    "Variant Image",
    "Variant Weight Unit",
)

# Read-only name -> column index lookup, derived once from SHOPIFY_FIELDS
FIELD_INDEX: Mapping[str, int] = MappingProxyType(
    {name: index for index, name in enumerate(SHOPIFY_FIELDS)}
)

MAX_OPTIONS = 3


def index_of(name: str) -> int:
    """
    Resolve a field name to its column index.

    Args:
        name: Shopify field name, e.g. "Variant SKU"

    Returns:
        Column index of the field

    Raises:
        UnknownFieldError: If the name is not part of the schema
    """
    try:
        return FIELD_INDEX[name]
    except KeyError:
        raise UnknownFieldError(name) from None


def field_at(index: int) -> str:
    """Return the field name at a column index."""
    if index < 0 or index >= len(SHOPIFY_FIELDS):
        raise IndexError(f"Field index must be between [0 and {len(SHOPIFY_FIELDS) - 1}]")
    return SHOPIFY_FIELDS[index]


def empty_row() -> Row:
    """Return a row with every field set to an empty string."""
    return [""] * len(SHOPIFY_FIELDS)


def set_field(row: Row, name: str, value: str) -> None:
    """Set the named field in a row."""
    row[index_of(name)] = value


def get_field(row: Row, name: str) -> str:
    """Return the value of the named field in a row."""
    return row[index_of(name)]


def option_fields(position: int) -> Tuple[str, str]:
    """Return the (name, value) field names for option slot ``position`` (1-based)."""
    return f"Option{position} Name", f"Option{position} Value"
