"""
Tests for Field Schema Module
"""

import pytest

from sqsp_to_shopify.errors import UnknownFieldError
from sqsp_to_shopify.field_schema import (
    FIELD_INDEX,
    SHOPIFY_FIELDS,
    empty_row,
    field_at,
    get_field,
    index_of,
    option_fields,
    set_field,
)


class TestFieldSchema:
    """Test cases for the Shopify field schema."""
    
    def test_schema_order(self):
        """Test the fixed column order."""
        assert SHOPIFY_FIELDS[0] == "Handle"
        assert SHOPIFY_FIELDS[1] == "Title"
        assert SHOPIFY_FIELDS[-1] == "Variant Weight Unit"
        assert len(set(SHOPIFY_FIELDS)) == len(SHOPIFY_FIELDS)
    
    def test_index_of(self):
        """Test name to index resolution."""
        assert index_of("Handle") == 0
        assert index_of("Image Src") == 24
        for index, name in enumerate(SHOPIFY_FIELDS):
            assert index_of(name) == index
            assert field_at(index) == name
    
    def test_unknown_field(self):
        """Test lookup of a name outside the schema."""
        with pytest.raises(UnknownFieldError) as exc_info:
            index_of("Variant Colour")
        assert exc_info.value.field == "Variant Colour"
    
    def test_field_at_out_of_range(self):
        """Test reverse lookup bounds."""
        with pytest.raises(IndexError):
            field_at(len(SHOPIFY_FIELDS))
        with pytest.raises(IndexError):
            field_at(-1)
    
    def test_empty_row(self):
        """Test empty row width and content."""
        row = empty_row()
        assert len(row) == len(SHOPIFY_FIELDS)
        assert all(value == "" for value in row)
        
        # Rows are independent
        other = empty_row()
        row[0] = "changed"
        assert other[0] == ""
    
    def test_set_field(self):
        """Test setting a field by name."""
        row = empty_row()
        set_field(row, "Variant SKU", "SKU1")
        assert row[index_of("Variant SKU")] == "SKU1"
        assert get_field(row, "Variant SKU") == "SKU1"
    
    def test_set_unknown_field(self):
        """Test that setting an unknown field raises and leaves the row untouched."""
        row = empty_row()
        with pytest.raises(UnknownFieldError):
            set_field(row, "Option4 Name", "Material")
        assert row == empty_row()
    
    def test_index_is_read_only(self):
        """Test the lookup table cannot be modified."""
        with pytest.raises(TypeError):
            FIELD_INDEX["Extra"] = 99
    
    def test_option_fields(self):
        """Test option field name helper."""
        assert option_fields(1) == ("Option1 Name", "Option1 Value")
        assert option_fields(3) == ("Option3 Name", "Option3 Value")
