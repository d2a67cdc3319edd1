"""
Unit tests for pricing calculations.

Tests table lookups, fallbacks, rounding, and currency formatting.
"""

import pytest

from image_dashboard.core.pricing import (
    DEFAULT_UNIT_PRICE,
    PRICING_TABLE,
    calculate_cost,
    format_currency,
    get_pricing_for_model,
)


class TestQualityPricedModel:
    """Test gpt-image-1, priced by quality tier only."""

    @pytest.mark.parametrize("quality,unit", [
        ("low", 0.02),
        ("medium", 0.07),
        ("high", 0.19),
    ])
    def test_known_quality(self, quality, unit):
        """Verify each quality tier uses its table price."""
        assert calculate_cost("gpt-image-1", "1024x1024", quality, 1) == unit

    def test_high_quality_times_three(self):
        """Verify unit price is multiplied by the image count."""
        # 0.19 * 3 = 0.57
        assert calculate_cost("gpt-image-1", None, "high", 3) == 0.57

    def test_unknown_quality_falls_back_to_high(self):
        """Verify unknown quality uses the highest tier."""
        assert calculate_cost("gpt-image-1", "1024x1024", "ultra", 1) == 0.19
        assert calculate_cost("gpt-image-1", "1024x1024", None, 1) == 0.19

    def test_size_is_ignored(self):
        """Verify size does not affect quality-priced models."""
        assert calculate_cost("gpt-image-1", "256x256", "low") == calculate_cost(
            "gpt-image-1", "1792x1024", "low"
        )


class TestSizeAndQualityPricedModel:
    """Test dall-e-3, priced by (size, quality)."""

    @pytest.mark.parametrize("size,quality,unit", [
        ("1024x1024", "standard", 0.04),
        ("1024x1024", "hd", 0.08),
        ("1024x1792", "standard", 0.08),
        ("1024x1792", "hd", 0.12),
        ("1792x1024", "standard", 0.08),
        ("1792x1024", "hd", 0.12),
    ])
    def test_table_values(self, size, quality, unit):
        """Verify every (size, quality) entry."""
        assert calculate_cost("dall-e-3", size, quality, 1) == unit

    def test_unknown_size_uses_baseline(self):
        """Verify unknown size falls back to 1024x1024/standard."""
        assert calculate_cost("dall-e-3", "640x480", "hd", 1) == 0.04
        assert calculate_cost("dall-e-3", None, None, 2) == 0.08

    def test_unknown_quality_uses_standard_for_size(self):
        """Verify unknown quality falls back to the size's standard price."""
        assert calculate_cost("dall-e-3", "1792x1024", "ultra", 1) == 0.08


class TestSizePricedModel:
    """Test dall-e-2, priced by size only."""

    @pytest.mark.parametrize("size,unit", [
        ("256x256", 0.016),
        ("512x512", 0.018),
        ("1024x1024", 0.02),
    ])
    def test_table_values(self, size, unit):
        """Verify every size entry."""
        assert calculate_cost("dall-e-2", size, None, 1) == unit

    def test_unknown_size_uses_1024(self):
        """Verify unknown size falls back to 1024x1024."""
        assert calculate_cost("dall-e-2", "2048x2048", None, 1) == 0.02


class TestCostCalculation:
    """Test defaults, counts and rounding."""

    def test_unknown_model_uses_default(self):
        """Verify unknown models use the conservative default price."""
        assert calculate_cost("some-new-model", "1024x1024", "standard", 1) == 0.10
        assert float(DEFAULT_UNIT_PRICE) == 0.10

    def test_falsy_count_defaults_to_one(self):
        """Verify n=0 and n=None are treated as a single image."""
        assert calculate_cost("dall-e-3", "1024x1024", "standard", 0) == 0.04
        assert calculate_cost("dall-e-3", "1024x1024", "standard", None) == 0.04

    def test_rounded_to_four_decimals(self):
        """Verify results are rounded to 4 decimal places."""
        # 0.016 * 7 = 0.112
        assert calculate_cost("dall-e-2", "256x256", None, 7) == 0.112
        # 0.018 * 3 = 0.054, no float noise
        assert calculate_cost("dall-e-2", "512x512", None, 3) == 0.054

    def test_large_counts(self):
        """Verify calculation with large counts."""
        assert calculate_cost("dall-e-3", "1024x1792", "hd", 1000) == 120.0

    def test_never_raises(self):
        """Verify odd inputs still produce a cost."""
        assert calculate_cost("", "", "", 1) == 0.10


class TestPricingIntrospection:
    """Test pricing table lookup helpers."""

    def test_known_model_slice(self):
        """Verify the raw slice is returned as floats."""
        table = get_pricing_for_model("dall-e-3")
        assert table["1024x1024"] == {"standard": 0.04, "hd": 0.08}
        assert set(table) == set(PRICING_TABLE["dall-e-3"])

    def test_flat_model_slice(self):
        """Verify flat tables are returned as a mapping of floats."""
        assert get_pricing_for_model("gpt-image-1") == {"low": 0.02, "medium": 0.07, "high": 0.19}

    def test_unknown_model_empty(self):
        """Verify unknown models yield an empty mapping."""
        assert get_pricing_for_model("unknown-model") == {}

    def test_slice_is_a_copy(self):
        """Verify mutating the returned slice leaves the table intact."""
        table = get_pricing_for_model("dall-e-2")
        table["256x256"] = 99.0
        assert calculate_cost("dall-e-2", "256x256", None, 1) == 0.016


class TestFormatCurrency:
    """Test currency formatting."""

    def test_three_decimals(self):
        """Verify costs render with the dollar sign and 3 decimals."""
        assert format_currency(0.04) == "$0.040"

    def test_rounds_to_three_decimals(self):
        """Verify extra precision is rounded away."""
        assert format_currency(0.0164) == "$0.016"
        assert format_currency(0.57) == "$0.570"

    def test_zero(self):
        """Verify zero cost formatting."""
        assert format_currency(0) == "$0.000"
