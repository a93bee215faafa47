"""Tests for item name normalization."""

import pytest

from pantry_tracker.item_normalizer import normalize_item_name, same_item


class TestNormalizeItemName:
    """Tests for normalize_item_name."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Moong Dal", "moong dal"),
            ("Moong Dal (2kg)", "moong dal"),
            ("moong dal 2 kg", "moong dal"),
            ("Olive Oil 500ml bottle", "olive oil"),
            ("  Basmati   Rice  ", "basmati rice"),
        ],
    )
    def test_normalizes(self, name, expected):
        assert normalize_item_name(name) == expected

    def test_measure_only_name_kept(self):
        assert normalize_item_name("500g") == "500g"


class TestSameItem:
    """Tests for same_item."""

    def test_same(self):
        assert same_item("Wheat Flour (10kg)", "wheat flour")

    def test_different(self):
        assert not same_item("Moong Dal", "Organic Moong Dal")
