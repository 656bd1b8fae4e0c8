"""
app/services/csv_study_service.py

CSV import of a single study and the downloadable CSV template.

Only the first data row is imported; extra rows produce a warning. Header
and shape problems are reported as issues on ``csv``/``csv.headers`` and
stop the import before normalization. Otherwise the row is mapped onto the
study field names and handed to the normalizer, whose issues are appended.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from footprint import (
    REFERENCE_STUDY,
    SEVERITY_WARNING,
    Issue,
    NormalizedStudy,
    StudyNormalizer,
    has_blocking_errors,
)

logger = logging.getLogger(__name__)

CSV_TEMPLATE_HEADERS: tuple[str, ...] = (
    "production_total_kg",
    "blue_m3",
    "green_m3",
    "grey_enabled",
    "grey_pollutant",
    "grey_load_kg",
    "grey_cmax_mg_l",
    "grey_cnat_mg_l",
)

TRUTHY_TOKENS = frozenset({"1", "true", "si", "sí", "yes", "y", "verdadero"})


class CSVUploadError(ValueError):
    """
    Raised when uploaded bytes cannot be read as a UTF-8 CSV document.
    """


@dataclass(frozen=True)
class CSVValidationResult:
    """
    Outcome of validating one uploaded study CSV.

    ``preview`` holds whatever could be normalized, even when business
    rules failed, so the caller can show what was parsed.
    """

    ok: bool
    headers: list[str] = field(default_factory=list)
    preview: NormalizedStudy | None = None
    issues: list[Issue] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "headers": list(self.headers),
            "preview": self.preview.to_dict() if self.preview is not None else None,
            "issues": [issue.to_dict() for issue in self.issues],
        }


def decode_csv_bytes(raw: bytes, *, max_bytes: int) -> str:
    """
    Decode an uploaded CSV payload, enforcing the size limit.
    """

    if len(raw) > max_bytes:
        raise CSVUploadError(f"CSV exceeds the {max_bytes} byte upload limit.")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CSVUploadError("CSV must be UTF-8 encoded.") from exc


def parse_csv_text(text: str) -> tuple[list[str], list[list[str]]]:
    """
    Split CSV *text* into trimmed headers and data rows.

    Line endings are normalized and rows whose cells are all blank are
    dropped.
    """

    normalized = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    rows = [
        [cell.strip() for cell in row]
        for row in csv.reader(io.StringIO(normalized))
        if any(cell.strip() for cell in row)
    ]
    if not rows:
        return [], []
    return rows[0], rows[1:]


def parse_boolean(value: str) -> bool:
    return value.strip().lower() in TRUTHY_TOKENS


class CSVStudyService:
    """
    Validates uploaded study CSVs and renders the import template.
    """

    def __init__(self, *, normalizer: StudyNormalizer | None = None) -> None:
        self._normalizer = normalizer or StudyNormalizer()

    def validate_csv_study(self, text: str) -> CSVValidationResult:
        """
        Validate a study CSV and normalize its first data row.
        """

        headers, rows = parse_csv_text(text)

        if not headers:
            return CSVValidationResult(
                ok=False,
                issues=[Issue(field="csv", message="El CSV esta vacio.")],
            )

        issues: list[Issue] = []
        header_set = set(headers)
        for required in CSV_TEMPLATE_HEADERS:
            if required not in header_set:
                issues.append(
                    Issue(field="csv.headers", message=f"Falta la columna requerida: {required}")
                )

        if not rows:
            issues.append(Issue(field="csv", message="No hay filas de datos para importar."))
        elif len(rows) > 1:
            issues.append(
                Issue(
                    field="csv",
                    message="Se detectaron varias filas. Solo se importara la primera.",
                    severity=SEVERITY_WARNING,
                )
            )

        if has_blocking_errors(issues):
            logger.info("CSV study rejected before normalization issues=%d", len(issues))
            return CSVValidationResult(ok=False, headers=headers, issues=issues)

        candidate = self.row_to_candidate(headers, rows[0])
        normalization = self._normalizer.normalize(candidate)
        merged = issues + normalization.issues
        ok = normalization.study is not None and not has_blocking_errors(merged)

        logger.info(
            "CSV study validated ok=%s rows=%d issues=%d",
            ok,
            len(rows),
            len(merged),
        )
        return CSVValidationResult(
            ok=ok,
            headers=headers,
            preview=normalization.study,
            issues=merged,
        )

    @staticmethod
    def row_to_candidate(headers: list[str], row: list[str]) -> dict[str, Any]:
        """
        Map one CSV row onto the raw study candidate shape.

        Missing trailing cells read as blank; a blank ``grey_cnat_mg_l`` is
        left out so the normalizer treats it as not supplied.
        """

        cells = {header: (row[index] if index < len(row) else "") for index, header in enumerate(headers)}

        grey: dict[str, Any] = {
            "enabled": parse_boolean(cells.get("grey_enabled", "false")),
            "pollutant": cells.get("grey_pollutant", ""),
            "load_kg": cells.get("grey_load_kg"),
            "cmax_mg_l": cells.get("grey_cmax_mg_l"),
        }
        cnat = cells.get("grey_cnat_mg_l", "")
        if cnat != "":
            grey["cnat_mg_l"] = cnat

        return {
            "production_total_kg": cells.get("production_total_kg"),
            "blue_m3": cells.get("blue_m3"),
            "green_m3": cells.get("green_m3"),
            "grey": grey,
        }

    @staticmethod
    def build_csv_template(study: NormalizedStudy = REFERENCE_STUDY) -> str:
        """
        Render the import template: header line plus one example row.
        """

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_TEMPLATE_HEADERS)
        writer.writerow(
            [
                format_csv_number(study.production_total_kg),
                format_csv_number(study.blue_m3),
                format_csv_number(study.green_m3),
                "true" if study.grey.enabled else "false",
                study.grey.pollutant,
                format_csv_number(study.grey.load_kg),
                format_csv_number(study.grey.cmax_mg_l),
                format_csv_number(study.grey.cnat_mg_l),
            ]
        )
        return buffer.getvalue()


def format_csv_number(value: float) -> str:
    """
    Render integral floats without a trailing ``.0`` (10000.0 -> 10000).
    """

    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@lru_cache(maxsize=1)
def get_csv_study_service() -> CSVStudyService:
    """
    Build and cache the CSV study service.
    """
    return CSVStudyService()
