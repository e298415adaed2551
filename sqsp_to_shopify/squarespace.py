"""
Squarespace Export Module
Decodes a Squarespace product export (JSON) into an in-memory catalog.
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import chardet
from loguru import logger

from .errors import DecodeError, FileAccessError

# Same bound as the interpreter's int string conversion limit
MAX_NUMBER_DIGITS = 4300


@dataclass
class ProductURL:
    """Product location; ``product_path`` becomes the Shopify handle."""
    full_path: str = ""
    product_path: str = ""
    collection_path: str = ""


@dataclass
class Visibility:
    # Parsed but not used by the mapping
    state: str = ""
    visible_on: Optional[str] = None


@dataclass
class Image:
    id: str = ""
    type: str = ""
    url: str = ""


@dataclass
class Variant:
    """A purchasable configuration of a product (size, color, ...)."""
    sku: str = ""
    price: str = ""
    quantity: int = 0
    unlimited: bool = False
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass
class Product:
    """A single product with all its images and variants."""
    id: str = ""
    website_id: str = ""
    product_type: str = ""
    url: ProductURL = field(default_factory=ProductURL)
    visibility: Visibility = field(default_factory=Visibility)
    name: str = ""
    description: str = ""
    images: List[Image] = field(default_factory=list)
    additional_info: Dict[str, Any] = field(default_factory=dict)
    featured: bool = False
    tags: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    variant_attribute_names: List[str] = field(default_factory=list)
    variants: List[Variant] = field(default_factory=list)

    @property
    def handle(self) -> str:
        """Shopify handle: the product path, or the last segment of the full path."""
        if self.url.product_path:
            return self.url.product_path
        return self.url.full_path.rstrip('/').rsplit('/', 1)[-1]

    def __str__(self) -> str:
        return f"Product({self.id}): {self.name}"


@dataclass
class Catalog:
    """One page of a Squarespace product export."""
    products: List[Product] = field(default_factory=list)
    has_prev_page: bool = False
    has_next_page: bool = False
    size_bytes: int = 0

    def __str__(self) -> str:
        return f"Catalog({self.size_bytes} bytes, {len(self.products)} items)"


def normalize_scalar(value: Any, field_name: str) -> str:
    """
    Normalize a JSON value that may be either a string or a number to a string.

    Args:
        value: Decoded JSON value
        field_name: Name used in the error message

    Returns:
        String form of the value; integral numbers render without a fraction

    Raises:
        DecodeError: If the value is neither a string nor a number
    """
    if isinstance(value, str):
        return value
    # bool is an int subclass but is not a number in the export
    if isinstance(value, bool):
        raise DecodeError(f"Unexpected type for {field_name}: bool ({value!r})")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if not value.is_finite() or abs(value.adjusted()) > MAX_NUMBER_DIGITS:
            raise DecodeError(f"Number out of range for {field_name}: {value}")
        text = format(value, 'f')
        if '.' in text:
            text = text.rstrip('0').rstrip('.')
        return text
    raise DecodeError(f"Unexpected type for {field_name}: {type(value).__name__} ({value!r})")


def _expect(value: Any, expected: Union[type, tuple], field_name: str, default: Any) -> Any:
    """Return ``value`` if it has the expected JSON type, ``default`` if it is missing."""
    if value is None:
        return default
    if not isinstance(value, expected) or (expected is not bool and isinstance(value, bool)):
        raise DecodeError(f"Expected {field_name} to be {_type_name(expected)}, got {type(value).__name__}")
    return value


def _type_name(expected: Union[type, tuple]) -> str:
    names = {dict: 'an object', list: 'an array', str: 'a string', bool: 'a boolean', int: 'an integer'}
    if isinstance(expected, tuple):
        return ' or '.join(names.get(t, t.__name__) for t in expected)
    return names.get(expected, expected.__name__)


def _string_list(value: Any, field_name: str) -> List[str]:
    items = _expect(value, list, field_name, [])
    return [_expect(item, str, f"{field_name}[]", "") for item in items]


def _decode_image(data: Any) -> Image:
    data = _expect(data, dict, "image", {})
    return Image(
        id=_expect(data.get('id'), str, "image.id", ""),
        type=_expect(data.get('type'), str, "image.type", ""),
        url=_expect(data.get('url'), str, "image.url", ""),
    )


def _decode_variant(data: Any) -> Variant:
    data = _expect(data, dict, "variant", {})
    price = _expect(data.get('price'), dict, "variant.price", {})
    stock = _expect(data.get('stock'), dict, "variant.stock", {})
    attributes = _expect(data.get('attributes'), dict, "variant.attributes", {})

    decimal_value = price.get('decimalValue')
    return Variant(
        sku=_expect(data.get('sku'), str, "variant.sku", ""),
        price="" if decimal_value is None else normalize_price(decimal_value),
        quantity=_expect(stock.get('quantity'), int, "variant.stock.quantity", 0),
        unlimited=_expect(stock.get('unlimited'), bool, "variant.stock.unlimited", False),
        # dict keeps the declaration order from the document
        attributes={
            name: normalize_scalar(value, f"variant.attributes[{name!r}]")
            for name, value in attributes.items()
        },
    )


def normalize_price(value: Any) -> str:
    """Keep a decimal price verbatim; numeric JSON prices arrive as Decimal, never float."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
        return str(value)
    raise DecodeError(f"Unexpected type for price.decimalValue: {type(value).__name__} ({value!r})")


def decode_product(data: Any) -> Product:
    """
    Build a Product from its decoded JSON object.

    Args:
        data: Decoded JSON object for one product

    Returns:
        Product instance

    Raises:
        DecodeError: If a field has an unexpected type
    """
    data = _expect(data, dict, "product", {})
    url = _expect(data.get('url'), dict, "url", {})
    visibility = _expect(data.get('visibility'), dict, "visibility", {})
    # An absent productType means no type; an explicit null is rejected
    product_type = normalize_scalar(data['productType'], "productType") if 'productType' in data else ""

    return Product(
        id=_expect(data.get('id'), str, "id", ""),
        website_id=_expect(data.get('websiteId'), str, "websiteId", ""),
        product_type=product_type,
        url=ProductURL(
            full_path=_expect(url.get('fullPath'), str, "url.fullPath", ""),
            product_path=_expect(url.get('productPath'), str, "url.productPath", ""),
            collection_path=_expect(url.get('collectionPath'), str, "url.collectionPath", ""),
        ),
        visibility=Visibility(
            state=_expect(visibility.get('state'), str, "visibility.state", ""),
            visible_on=_expect(visibility.get('visibleOn'), str, "visibility.visibleOn", None),
        ),
        name=_expect(data.get('name'), str, "name", ""),
        description=_expect(data.get('description'), str, "description", ""),
        images=[_decode_image(image) for image in _expect(data.get('images'), list, "images", [])],
        additional_info=_expect(data.get('additionalInfo'), dict, "additionalInfo", {}),
        featured=_expect(data.get('featuredProduct'), bool, "featuredProduct", False),
        tags=_string_list(data.get('tags'), "tags"),
        categories=_string_list(data.get('categories'), "categories"),
        variant_attribute_names=_string_list(data.get('variantAttributeNames'), "variantAttributeNames"),
        variants=[_decode_variant(variant) for variant in _expect(data.get('variants'), list, "variants", [])],
    )


def decode_catalog(text: str) -> Catalog:
    """
    Decode the text of a Squarespace export.

    Args:
        text: JSON document with ``results``, ``hasPrevPage`` and ``hasNextPage``

    Returns:
        Catalog instance

    Raises:
        DecodeError: If the text is not JSON or does not have the expected shape
    """
    try:
        document = json.loads(text, parse_float=Decimal)
    except ValueError as e:
        # JSONDecodeError, or an integer literal beyond the int conversion limit
        raise DecodeError(f"Unable to decode JSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError(f"Expected a JSON object at top level, got {type(document).__name__}")

    results = _expect(document.get('results'), list, "results", [])
    products = []
    for position, item in enumerate(results):
        try:
            products.append(decode_product(item))
        except DecodeError as e:
            raise DecodeError(f"results[{position}]: {e}") from e

    return Catalog(
        products=products,
        has_prev_page=_expect(document.get('hasPrevPage'), bool, "hasPrevPage", False),
        has_next_page=_expect(document.get('hasNextPage'), bool, "hasNextPage", False),
        size_bytes=len(text.encode('utf-8')),
    )


def detect_encoding(data: bytes) -> str:
    """
    Detect the encoding of the export.

    Args:
        data: Raw file content

    Returns:
        Detected encoding string
    """
    result = chardet.detect(data[:10000])  # First 10KB is enough for detection
    encoding = result['encoding']
    confidence = result['confidence'] or 0.0

    # Exports are UTF-8; ascii is a subset and a BOM is stripped by utf-8-sig
    if not encoding or encoding.lower() in ('ascii', 'utf-8', 'utf-8-sig'):
        return 'utf-8-sig'
    logger.info(f"Detected encoding: {encoding} (confidence: {confidence:.2%})")
    return encoding


def load_catalog(file_path: str) -> Catalog:
    """
    Read and decode an export file. The file is closed as soon as it is read.

    Args:
        file_path: Path to the Squarespace JSON export

    Returns:
        Catalog instance

    Raises:
        FileAccessError: If the file cannot be read
        DecodeError: If the content is not a valid export
    """
    path = Path(file_path)
    logger.info(f"Reading Squarespace export: {path}")

    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        logger.error(f"Error reading export file: {e}")
        raise FileAccessError(str(path), e) from e

    encoding = detect_encoding(data)
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise DecodeError(f"Unable to decode file as {encoding}: {e}", path=str(path)) from e

    try:
        catalog = decode_catalog(text)
    except DecodeError as e:
        logger.error(f"Error decoding export file: {e}")
        raise DecodeError(str(e), path=str(path)) from e

    logger.info(f"Loaded {len(catalog.products)} products from {path}")
    return catalog


def describe_catalog(catalog: Catalog) -> List[str]:
    """Return human readable lines describing the catalog, one per product."""
    lines = [str(catalog), f"  Prev/Next: {catalog.has_prev_page} / {catalog.has_next_page}"]
    for position, product in enumerate(catalog.products):
        lines.append(
            f"  {position:4d} : {product} [type={product.product_type}] "
            f"handle={product.handle} images={len(product.images)} variants={len(product.variants)}"
        )
    return lines
