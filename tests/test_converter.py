"""
Tests for Catalog Converter Module
"""

import csv
import io
import json
import os
import tempfile
from pathlib import Path

import pytest

from sqsp_to_shopify.converter import CatalogConverter
from sqsp_to_shopify.errors import DecodeError, TooManyVariantOptionsError
from sqsp_to_shopify.field_schema import SHOPIFY_FIELDS


def product(handle, images=(), variants=(), **extra):
    data = {
        "id": f"id-{handle}",
        "productType": 1,
        "url": {"productPath": handle},
        "name": handle.replace('-', ' ').title(),
        "images": [{"url": url} for url in images],
        "variants": list(variants),
        "tags": [],
        "categories": [],
    }
    data.update(extra)
    return data


def variant(sku, price="1.00", qty=1, **attributes):
    return {
        "sku": sku,
        "price": {"decimalValue": price},
        "stock": {"unlimited": False, "quantity": qty},
        "attributes": attributes,
    }


class TestCatalogConverter:
    """Test cases for CatalogConverter."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.input_path = str(Path(self.temp_dir.name) / "export.json")
        self.output_path = str(Path(self.temp_dir.name) / "shopify.csv")

    def teardown_method(self):
        self.temp_dir.cleanup()

    def write_export(self, *products, has_next=False):
        with open(self.input_path, 'w', encoding='utf-8') as f:
            json.dump({"results": list(products), "hasPrevPage": False, "hasNextPage": has_next}, f)

    def read_output(self):
        with open(self.output_path, newline='', encoding='utf-8') as f:
            return list(csv.reader(f))

    def test_convert(self):
        """Test a full conversion in catalog order."""
        self.write_export(
            product("red-mug", images=["a.jpg", "b.jpg"], variants=[variant("SKU1", "9.99", 5, Color="Red")],
                    categories=["Mugs"], tags=["Sale", "New"]),
            product("plain-cup"),
        )

        report = CatalogConverter(self.input_path, self.output_path).convert()

        rows = self.read_output()
        assert rows[0] == list(SHOPIFY_FIELDS)
        assert [row[0] for row in rows[1:]] == ["red-mug", "red-mug", "plain-cup"]
        first = dict(zip(SHOPIFY_FIELDS, rows[1]))
        assert first["Tags"] == "Mugs,Sale,New"
        assert first["Variant Price"] == "9.99"
        assert first["Option1 Name"] == "Color"
        assert report['products'] == 2
        assert report['rows'] == 3
        assert report['output'] == self.output_path

    def test_empty_catalog_writes_header(self):
        """Test the header is written even without products."""
        self.write_export()

        report = CatalogConverter(self.input_path, self.output_path).convert()

        assert self.read_output() == [list(SHOPIFY_FIELDS)]
        assert report['rows'] == 0

    def test_too_many_options_stops_output(self):
        """Test a product with four attributes aborts after the header."""
        self.write_export(
            product("busy", variants=[variant("X", A="1", B="2", C="3", D="4")]),
            product("never-written"),
        )

        with pytest.raises(TooManyVariantOptionsError):
            CatalogConverter(self.input_path, self.output_path).convert()

        assert self.read_output() == [list(SHOPIFY_FIELDS)]

    def test_failure_after_earlier_products(self):
        """Test earlier products stay written when a later one fails."""
        self.write_export(
            product("ok", images=["a.jpg"]),
            product("busy", variants=[variant("X", A="1", B="2", C="3", D="4")]),
        )

        with pytest.raises(TooManyVariantOptionsError):
            CatalogConverter(self.input_path, self.output_path).convert()

        assert [row[0] for row in self.read_output()] == ["Handle", "ok"]

    def test_atomic_failure_leaves_no_output(self):
        """Test atomic mode writes nothing when the run fails."""
        self.write_export(product("busy", variants=[variant("X", A="1", B="2", C="3", D="4")]))

        with pytest.raises(TooManyVariantOptionsError):
            CatalogConverter(self.input_path, self.output_path, atomic=True).convert()

        assert not os.path.exists(self.output_path)

    def test_decode_error_writes_nothing(self):
        """Test a bad export fails before any output."""
        with open(self.input_path, 'w') as f:
            f.write('{"results": [{"productType": true}]}')

        with pytest.raises(DecodeError):
            CatalogConverter(self.input_path, self.output_path).convert()

        assert not os.path.exists(self.output_path)

    def test_stream_output(self):
        """Test converting into an open stream."""
        self.write_export(product("red-mug"))
        stream = io.StringIO()

        CatalogConverter(self.input_path, stream=stream).convert()

        lines = stream.getvalue().splitlines()
        assert lines[0].startswith("Handle,Title,Body (HTML)")
        assert lines[1].startswith("red-mug,Red Mug,")

    def test_validation_warnings(self):
        """Test validation collects warnings without failing."""
        self.write_export(
            product("dup", images=["not a url"]),
            product("dup", variants=[variant("X", price="abc")]),
            has_next=True,
        )

        report = CatalogConverter(self.input_path, self.output_path, validate=True).convert()

        warnings = " ".join(report['warnings'])
        assert "hasNextPage" in warnings
        assert "Handle 'dup'" in warnings
        assert "Invalid image URL" in warnings
        assert "Invalid price" in warnings
        assert report['rows'] == 2

    def test_convert_twice_reports_each_run(self):
        """Test a second run does not accumulate counts or warnings."""
        self.write_export(product("mug", images=["not a url"]), has_next=True)
        converter = CatalogConverter(self.input_path, self.output_path, validate=True)

        first = converter.convert()
        second = converter.convert()

        assert first['rows'] == second['rows'] == 1
        assert first['products'] == second['products'] == 1
        assert len(second['warnings']) == len(first['warnings']) == 2
