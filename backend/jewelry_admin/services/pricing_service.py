"""
Pricing Service - gold price calculator used at the counter.

Weights are entered in grams and priced per tickal (16.6 g). Purity is
expressed in "pe" out of 16 (16 pe = pure gold); quality codes name the
purity grade, e.g. "p15" is 15 pe and "p14_2" is 14.5 pe.

Selling price per tickal:  16 / (16 + (16 - pe)) * market price
Buying price per tickal:   pe / 16 * market price   (p14_2 buys at 14 pe)

When buying, an extra deduction for loss in yway and pe is applied:
    ((yway / 8 + pe_loss) / 16) * buying price per tickal
"""

from __future__ import annotations

from ..validation import ValidationError, coerce_float

GRAMS_PER_TICKAL = 16.6

QUALITY_PE = {
    "p15": 15.0,
    "p14_2": 14.5,
    "p13": 13.0,
    "p12": 12.0,
    "p11": 11.0,
    "p10": 10.0,
    "p9": 9.0,
    "p8": 8.0,
}
DEFAULT_QUALITY = "p15"

# Buying rounds the half-grade down
BUY_PE_OVERRIDES = {"p14_2": 14.0}

PRICE_MODES = ("sell", "buy")


def calculate_gold_price(
    *,
    weight,
    gold_price,
    quality: str | None = DEFAULT_QUALITY,
    mode: str = "sell",
    yway=0,
    pe=0,
) -> dict:
    if mode not in PRICE_MODES:
        raise ValidationError(f"mode must be one of: {', '.join(PRICE_MODES)}")
    if weight in (None, "") or gold_price in (None, ""):
        raise ValidationError("weight and gold_price are required")

    grams = coerce_float("weight", weight)
    market_price = coerce_float("gold_price", gold_price)
    if grams < 0 or market_price < 0:
        raise ValidationError("weight and gold_price must be >= 0")

    quality = quality if quality in QUALITY_PE else DEFAULT_QUALITY
    pe_value = QUALITY_PE[quality]
    tickal = grams / GRAMS_PER_TICKAL

    if mode == "sell":
        unit_price = (16 / (16 + (16 - pe_value))) * market_price
    else:
        unit_price = (BUY_PE_OVERRIDES.get(quality, pe_value) / 16) * market_price

    total_weight_value = tickal * unit_price
    deduction_value = 0.0
    if mode == "buy":
        yway_loss = abs(coerce_float("yway", yway or 0))
        pe_loss = abs(coerce_float("pe", pe or 0))
        deduction_value = ((yway_loss / 8 + pe_loss) / 16) * unit_price

    return {
        "mode": mode,
        "quality": quality,
        "weight_tickal": tickal,
        "gold_price": unit_price,
        "total_weight_value": total_weight_value,
        "deduction_value": deduction_value,
        "final_price": total_weight_value - deduction_value,
    }
