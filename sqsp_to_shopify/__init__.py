"""
Squarespace → Shopify product converter.

Reads a Squarespace product export (JSON) and writes a Shopify product
import CSV, expanding each product into one row per image/variant.
"""

from .converter import CatalogConverter
from .errors import (
    ConversionError,
    DecodeError,
    FileAccessError,
    TooManyVariantOptionsError,
    UnknownFieldError,
)
from .mapper import ProductMapper

__version__ = "0.1.0"

__all__ = [
    "CatalogConverter",
    "ProductMapper",
    "ConversionError",
    "DecodeError",
    "FileAccessError",
    "TooManyVariantOptionsError",
    "UnknownFieldError",
]
