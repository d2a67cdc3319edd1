"""
Pricing calculations for image generation.

Handles per-image cost computations for the supported OpenAI image models.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional


# Fixed pricing table in USD per image - no dynamic fetching
PRICING_TABLE: Dict[str, Dict] = {
    # Priced by quality tier only
    "gpt-image-1": {
        "low": Decimal("0.02"),
        "medium": Decimal("0.07"),
        "high": Decimal("0.19"),
    },
    # Priced by (size, quality)
    "dall-e-3": {
        "1024x1024": {
            "standard": Decimal("0.04"),
            "hd": Decimal("0.08"),
        },
        "1024x1792": {
            "standard": Decimal("0.08"),
            "hd": Decimal("0.12"),
        },
        "1792x1024": {
            "standard": Decimal("0.08"),
            "hd": Decimal("0.12"),
        },
    },
    # Priced by size only
    "dall-e-2": {
        "256x256": Decimal("0.016"),
        "512x512": Decimal("0.018"),
        "1024x1024": Decimal("0.020"),
    },
}

# Conservative estimate for models missing from the table
DEFAULT_UNIT_PRICE = Decimal("0.10")

# dall-e-3 baseline: 1024x1024 / standard
DALL_E_3_BASELINE_PRICE = PRICING_TABLE["dall-e-3"]["1024x1024"]["standard"]


def get_unit_price(model: str, size: Optional[str] = None, quality: Optional[str] = None) -> Decimal:
    """Resolve the price of a single image.

    Never raises: unknown sizes, qualities and models fall back to
    the documented defaults for their pricing family.

    Args:
        model: Model identifier
        size: Image size such as "1024x1024"
        quality: Quality tier ("low", "standard", "hd", ...)

    Returns:
        Unit price as a Decimal
    """
    if model == "gpt-image-1":
        tiers = PRICING_TABLE[model]
        return tiers.get(quality, tiers["high"])

    if model == "dall-e-3":
        size_prices = PRICING_TABLE[model].get(size)
        if size_prices is None:
            return DALL_E_3_BASELINE_PRICE
        return size_prices.get(quality, size_prices["standard"])

    if model == "dall-e-2":
        sizes = PRICING_TABLE[model]
        return sizes.get(size, sizes["1024x1024"])

    return DEFAULT_UNIT_PRICE


def calculate_cost(
    model: str,
    size: Optional[str] = None,
    quality: Optional[str] = None,
    n: Optional[int] = 1
) -> float:
    """Calculate total cost for an image request.

    Args:
        model: Model identifier
        size: Image size
        quality: Quality tier
        n: Number of images, treated as 1 when falsy

    Returns:
        Unit price times n, rounded to 4 decimal places
    """
    count = n or 1
    total = get_unit_price(model, size, quality) * Decimal(count)
    return float(total.quantize(Decimal("0.0001"), rounding=ROUND_HALF_UP))


def get_pricing_for_model(model: str) -> Dict:
    """Return the raw pricing slice for a model.

    Prices are converted to floats. Unknown models yield an empty dict.
    """
    table = PRICING_TABLE.get(model)
    if table is None:
        return {}
    return _to_floats(table)


def _to_floats(table: Dict) -> Dict:
    return {
        key: _to_floats(value) if isinstance(value, dict) else float(value)
        for key, value in table.items()
    }


def format_currency(cost: float) -> str:
    """Format a cost as dollars with three decimal places."""
    return f"${cost:.3f}"
