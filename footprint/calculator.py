"""
footprint/calculator.py

Deterministic water footprint calculation.

Formulas (Water Footprint Assessment Manual)
--------------------------------------------
WF blue  [L/kg] = blue_m3 * 1000 / production_total_kg
WF green [L/kg] = green_m3 * 1000 / production_total_kg
V grey   [L]    = load_kg * 1 000 000 / (cmax_mg_l - cnat_mg_l)
WF grey  [L/kg] = V grey / production_total_kg

The load is converted from kg to mg so that mg / (mg/L) yields liters.
A study whose grey rules failed (cmax_mg_l <= cnat_mg_l) still calculates:
its grey volumes are infinite rather than an error.
Every output is rounded to 3 decimals on its own; totals are summed from
unrounded components.
"""

from __future__ import annotations

import logging
import math

from footprint.models import FootprintResult, NormalizedStudy

logger = logging.getLogger(__name__)

LITERS_PER_M3 = 1000.0
MG_PER_KG = 1_000_000.0
DECIMALS = 3


def round_half_away(value: float, decimals: int = DECIMALS) -> float:
    """
    Round *value* to *decimals* places, ties away from zero.

    Python's built-in ``round`` uses banker's rounding, which would turn
    ``0.0005`` into ``0.0``.
    """

    factor = 10**decimals
    scaled = abs(value) * factor
    if not math.isfinite(scaled):
        return value
    return math.copysign(math.floor(scaled + 0.5) / factor, value)


class FootprintCalculator:
    """
    Stateless footprint engine.

    Total over any normalized study. Results are only meaningful when the
    study came out of normalization without blocking errors.

    Usage::

        result = FootprintCalculator().calculate(REFERENCE_STUDY)
        result.total_l_per_kg  # 796.667
    """

    def calculate(self, study: NormalizedStudy) -> FootprintResult:
        production = study.production_total_kg

        blue_l_per_kg = study.blue_m3 * LITERS_PER_M3 / production
        green_l_per_kg = study.green_m3 * LITERS_PER_M3 / production

        grey_m3_total = 0.0
        grey_l_per_kg = 0.0
        if study.grey.enabled:
            concentration_gap = study.grey.cmax_mg_l - study.grey.cnat_mg_l
            if concentration_gap > 0:
                grey_l_total = study.grey.load_kg * MG_PER_KG / concentration_gap
            else:
                grey_l_total = math.inf
            grey_m3_total = grey_l_total / LITERS_PER_M3
            grey_l_per_kg = grey_l_total / production

        total_l_per_kg = blue_l_per_kg + green_l_per_kg + grey_l_per_kg
        total_m3 = study.blue_m3 + study.green_m3 + grey_m3_total

        logger.debug(
            "Footprint computed production_kg=%.3f total_l_per_kg=%.4f grey_enabled=%s",
            production,
            total_l_per_kg,
            study.grey.enabled,
        )

        return FootprintResult(
            blue_l_per_kg=round_half_away(blue_l_per_kg),
            green_l_per_kg=round_half_away(green_l_per_kg),
            grey_l_per_kg=round_half_away(grey_l_per_kg),
            total_l_per_kg=round_half_away(total_l_per_kg),
            blue_m3_total=round_half_away(study.blue_m3),
            green_m3_total=round_half_away(study.green_m3),
            grey_m3_total=round_half_away(grey_m3_total),
            total_m3=round_half_away(total_m3),
        )


_calculator = FootprintCalculator()


def calculate(study: NormalizedStudy) -> FootprintResult:
    """Compute the footprint of a normalized study."""
    return _calculator.calculate(study)
