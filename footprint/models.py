"""
footprint/models.py

Value objects shared by the normalizer, the calculator and every
collaborator that serialises a study (HTTP, CSV, PDF, JSON documents).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

Severity = Literal["error", "warning"]

SEVERITY_ERROR: Severity = "error"
SEVERITY_WARNING: Severity = "warning"


@dataclass(frozen=True)
class Issue:
    """
    One validation finding attached to a dotted field path.
    """

    field: str
    message: str
    severity: Severity = SEVERITY_ERROR

    @property
    def is_blocking(self) -> bool:
        return self.severity == SEVERITY_ERROR

    def to_dict(self) -> dict[str, str]:
        return {
            "field": self.field,
            "message": self.message,
            "severity": self.severity,
        }


@dataclass(frozen=True)
class GreyComponent:
    """
    Grey water inputs: one pollutant, its load and the ambient concentrations.
    """

    enabled: bool = False
    pollutant: str = ""
    load_kg: float = 0.0
    cmax_mg_l: float = 0.0
    cnat_mg_l: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "pollutant": self.pollutant,
            "load_kg": self.load_kg,
            "cmax_mg_l": self.cmax_mg_l,
            "cnat_mg_l": self.cnat_mg_l,
        }


@dataclass(frozen=True)
class NormalizedStudy:
    """
    Fully typed study record.

    Built by :func:`footprint.normalizer.normalize`; the only hand-built
    instance is :data:`REFERENCE_STUDY`.
    """

    production_total_kg: float
    blue_m3: float
    green_m3: float
    grey: GreyComponent = field(default_factory=GreyComponent)

    def to_dict(self) -> dict[str, Any]:
        return {
            "production_total_kg": self.production_total_kg,
            "blue_m3": self.blue_m3,
            "green_m3": self.green_m3,
            "grey": self.grey.to_dict(),
        }


@dataclass(frozen=True)
class FootprintResult:
    """
    Derived footprint metrics, every value rounded to 3 decimals.

    Per-kg values are liters of water per kilogram of product; ``*_total``
    and ``total_m3`` are cubic meters for the whole production.
    """

    blue_l_per_kg: float
    green_l_per_kg: float
    grey_l_per_kg: float
    total_l_per_kg: float
    blue_m3_total: float
    green_m3_total: float
    grey_m3_total: float
    total_m3: float

    def to_dict(self) -> dict[str, float]:
        return {
            "blue_l_per_kg": self.blue_l_per_kg,
            "green_l_per_kg": self.green_l_per_kg,
            "grey_l_per_kg": self.grey_l_per_kg,
            "total_l_per_kg": self.total_l_per_kg,
            "blue_m3_total": self.blue_m3_total,
            "green_m3_total": self.green_m3_total,
            "grey_m3_total": self.grey_m3_total,
            "total_m3": self.total_m3,
        }


@dataclass(frozen=True)
class NormalizationResult:
    """
    Outcome of one normalization attempt.

    ``study`` may be present even when ``issues`` hold errors (business-rule
    failures); use :attr:`has_blocking_errors` to decide whether the study
    can be calculated or exported.
    """

    study: NormalizedStudy | None
    issues: list[Issue] = field(default_factory=list)

    @property
    def has_blocking_errors(self) -> bool:
        return has_blocking_errors(self.issues)


def has_blocking_errors(issues: Iterable[Issue]) -> bool:
    """Return True when at least one issue has error severity."""
    return any(issue.severity == SEVERITY_ERROR for issue in issues)


# Greenhouse tomato reference study used for templates, demos and examples.
REFERENCE_STUDY = NormalizedStudy(
    production_total_kg=10000.0,
    blue_m3=5500.0,
    green_m3=2200.0,
    grey=GreyComponent(
        enabled=True,
        pollutant="Nitratos (NO3-)",
        load_kg=12.0,
        cmax_mg_l=50.0,
        cnat_mg_l=5.0,
    ),
)
