"""
footprint package: study normalization and water footprint calculation.
"""

from footprint.calculator import FootprintCalculator, calculate, round_half_away
from footprint.models import (
    REFERENCE_STUDY,
    SEVERITY_ERROR,
    SEVERITY_WARNING,
    FootprintResult,
    GreyComponent,
    Issue,
    NormalizationResult,
    NormalizedStudy,
    has_blocking_errors,
)
from footprint.normalizer import StudyNormalizer, normalize

__all__ = [
    "REFERENCE_STUDY",
    "SEVERITY_ERROR",
    "SEVERITY_WARNING",
    "FootprintCalculator",
    "FootprintResult",
    "GreyComponent",
    "Issue",
    "NormalizationResult",
    "NormalizedStudy",
    "StudyNormalizer",
    "calculate",
    "has_blocking_errors",
    "normalize",
    "round_half_away",
]
