"""
Errors Module
Exceptions raised while converting a Squarespace export to a Shopify CSV.
"""

from typing import List, Optional


class ConversionError(Exception):
    """Base class for every failure that aborts a conversion run."""


class DecodeError(ConversionError):
    """The input is not well-formed JSON or does not have the expected shape."""
    
    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class UnknownFieldError(ConversionError):
    """A field name that is not part of the Shopify schema was used."""
    
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Field {field!r} not found in Shopify schema")


class TooManyVariantOptionsError(ConversionError):
    """A product declares more variant attributes than Shopify has option slots."""
    
    def __init__(self, product_id: str, product_name: str, attributes: List[str], limit: int = 3):
        self.product_id = product_id
        self.product_name = product_name
        self.attributes = list(attributes)
        self.limit = limit
        super().__init__(
            f"Product {product_id} ({product_name!r}) has {len(self.attributes)} variant "
            f"attributes {self.attributes} - can only handle {limit} options"
        )


class FileAccessError(ConversionError):
    """Reading the export or writing the CSV failed."""
    
    def __init__(self, path: str, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"Unable to access {path}: {error}")
