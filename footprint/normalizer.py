"""
footprint/normalizer.py

Validation and normalization of raw study candidates.

A candidate is whatever the outside world hands over: a decoded JSON body,
a CSV row mapped onto the study field names, or an imported JSON document.
Normalization runs in three stages:

1. Type coercion. Every field is coerced on its own; each failure becomes
   one error issue. Any failure stops normalization with no study.
2. Default resolution for ``grey.cnat_mg_l`` (warning when grey is enabled).
3. Grey business rules, only when grey is enabled. All rules are evaluated
   and their errors accumulate; the study is still returned.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any, Mapping

from footprint.models import (
    SEVERITY_WARNING,
    GreyComponent,
    Issue,
    NormalizationResult,
    NormalizedStudy,
)

logger = logging.getLogger(__name__)

# Marks a key the candidate does not carry at all, as opposed to an explicit null.
_MISSING = object()

MSG_STUDY_NOT_OBJECT = "El estudio debe ser un objeto con los campos requeridos."
MSG_GREY_NOT_OBJECT = "La componente gris debe ser un objeto."
MSG_REQUIRED = "Valor requerido."
MSG_NOT_A_NUMBER = "Debe ser un numero."
MSG_NOT_FINITE = "Debe ser un numero finito."
MSG_NOT_POSITIVE = "Debe ser mayor que 0."
MSG_NEGATIVE = "No puede ser negativo."
MSG_NOT_BOOLEAN = "Debe ser verdadero o falso."
MSG_NOT_TEXT = "Debe ser un texto."

MSG_CNAT_DEFAULTED = (
    "Cnat no informado. Se aplica valor por defecto de 0 mg/L "
    "(revisalo para no infra/sobreestimar la componente gris)."
)
MSG_POLLUTANT_REQUIRED = "Debes indicar el contaminante principal para la huella gris."
MSG_LOAD_NOT_POSITIVE = "La carga contaminante (kg) debe ser mayor que 0 cuando gris esta habilitada."
MSG_CMAX_NOT_POSITIVE = "Cmax (mg/L) debe ser mayor que 0 cuando gris esta habilitada."
MSG_CMAX_NOT_ABOVE_CNAT = "Cmax debe ser estrictamente mayor que Cnat para calcular la huella gris."


class StudyNormalizer:
    """
    Coerces, defaults and validates one study candidate.

    Stateless; a single instance can serve any number of calls.
    """

    def normalize(self, candidate: Any) -> NormalizationResult:
        """
        Normalize *candidate* into a :class:`NormalizedStudy` plus issues.

        A :class:`NormalizedStudy` may be passed back in; it is re-read from
        its dictionary form so the same rules apply.
        """

        if isinstance(candidate, NormalizedStudy):
            candidate = candidate.to_dict()

        if not isinstance(candidate, Mapping):
            logger.debug("Rejected study candidate of type %s", type(candidate).__name__)
            return NormalizationResult(
                study=None,
                issues=[Issue(field="study", message=MSG_STUDY_NOT_OBJECT)],
            )

        errors: list[Issue] = []

        production_total_kg = self._read_number(
            candidate.get("production_total_kg", _MISSING),
            field="production_total_kg",
            errors=errors,
            required=True,
            strictly_positive=True,
        )
        blue_m3 = self._read_number(
            candidate.get("blue_m3", _MISSING),
            field="blue_m3",
            errors=errors,
            required=True,
        )
        green_m3 = self._read_number(
            candidate.get("green_m3", _MISSING),
            field="green_m3",
            errors=errors,
            required=True,
        )

        grey_raw = candidate.get("grey", _MISSING)

        enabled = False
        pollutant = ""
        load_kg: float | None = None
        cmax_mg_l: float | None = None
        cnat_mg_l: float | None = None

        if grey_raw is _MISSING:
            errors.append(Issue(field="grey", message=MSG_REQUIRED))
        elif isinstance(grey_raw, Mapping):
            enabled = self._read_bool(grey_raw.get("enabled", _MISSING), field="grey.enabled", errors=errors)
            pollutant = self._read_text(grey_raw.get("pollutant", _MISSING), field="grey.pollutant", errors=errors)
            load_kg = self._read_number(grey_raw.get("load_kg", _MISSING), field="grey.load_kg", errors=errors)
            cmax_mg_l = self._read_number(grey_raw.get("cmax_mg_l", _MISSING), field="grey.cmax_mg_l", errors=errors)
            cnat_mg_l = self._read_number(grey_raw.get("cnat_mg_l", _MISSING), field="grey.cnat_mg_l", errors=errors)
        else:
            errors.append(Issue(field="grey", message=MSG_GREY_NOT_OBJECT))

        if errors:
            logger.debug("Study candidate failed coercion fields=%s", [error.field for error in errors])
            return NormalizationResult(study=None, issues=errors)

        issues: list[Issue] = []

        if cnat_mg_l is None:
            cnat_mg_l = 0.0
            if enabled:
                issues.append(
                    Issue(
                        field="grey.cnat_mg_l",
                        message=MSG_CNAT_DEFAULTED,
                        severity=SEVERITY_WARNING,
                    )
                )

        grey = GreyComponent(
            enabled=enabled,
            pollutant=pollutant,
            load_kg=0.0 if load_kg is None else load_kg,
            cmax_mg_l=0.0 if cmax_mg_l is None else cmax_mg_l,
            cnat_mg_l=cnat_mg_l,
        )
        if grey.enabled:
            issues.extend(self._check_grey_rules(grey))

        study = NormalizedStudy(
            production_total_kg=production_total_kg,  # type: ignore[arg-type]
            blue_m3=blue_m3,  # type: ignore[arg-type]
            green_m3=green_m3,  # type: ignore[arg-type]
            grey=grey,
        )
        return NormalizationResult(study=study, issues=issues)

    def _check_grey_rules(self, grey: GreyComponent) -> list[Issue]:
        issues: list[Issue] = []

        if not grey.pollutant.strip():
            issues.append(Issue(field="grey.pollutant", message=MSG_POLLUTANT_REQUIRED))
        if grey.load_kg <= 0:
            issues.append(Issue(field="grey.load_kg", message=MSG_LOAD_NOT_POSITIVE))
        if grey.cmax_mg_l <= 0:
            issues.append(Issue(field="grey.cmax_mg_l", message=MSG_CMAX_NOT_POSITIVE))
        if grey.cmax_mg_l <= grey.cnat_mg_l:
            issues.append(Issue(field="grey.cmax_mg_l", message=MSG_CMAX_NOT_ABOVE_CNAT))

        return issues

    def _read_number(
        self,
        value: Any,
        *,
        field: str,
        errors: list[Issue],
        required: bool = False,
        strictly_positive: bool = False,
    ) -> float | None:
        """
        Coerce one numeric field.

        A missing key fails only when *required*. A blank or null value reads
        as 0 for required fields and as not supplied (None) otherwise.
        """

        if value is _MISSING:
            if required:
                errors.append(Issue(field=field, message=MSG_REQUIRED))
            return None
        if self._is_blank(value):
            if not required:
                return None
            value = 0.0

        number = self._coerce_number(value)
        if number is None:
            errors.append(Issue(field=field, message=MSG_NOT_A_NUMBER))
            return None
        if not math.isfinite(number):
            errors.append(Issue(field=field, message=MSG_NOT_FINITE))
            return None
        if strictly_positive and number <= 0:
            errors.append(Issue(field=field, message=MSG_NOT_POSITIVE))
            return None
        if number < 0:
            errors.append(Issue(field=field, message=MSG_NEGATIVE))
            return None
        return number

    def _read_bool(self, value: Any, *, field: str, errors: list[Issue]) -> bool:
        if value is _MISSING:
            return False
        if isinstance(value, bool):
            return value
        errors.append(Issue(field=field, message=MSG_NOT_BOOLEAN))
        return False

    def _read_text(self, value: Any, *, field: str, errors: list[Issue]) -> str:
        if value is _MISSING:
            return ""
        if isinstance(value, str):
            return value.strip()
        errors.append(Issue(field=field, message=MSG_NOT_TEXT))
        return ""

    @staticmethod
    def _coerce_number(value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            try:
                return float(value)
            except OverflowError:
                return math.inf
            except ValueError:
                return None
        if isinstance(value, str):
            # float() also takes digit separators ("1_000"); a cell never does.
            if "_" in value:
                return None
            try:
                return float(value.strip())
            except ValueError:
                return None
        return None

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return isinstance(value, str) and value.strip() == ""


_normalizer = StudyNormalizer()


def normalize(candidate: Any) -> NormalizationResult:
    """Normalize one raw study candidate with the shared normalizer."""
    return _normalizer.normalize(candidate)
