"""
app/services/export_service.py

Flat ``metric,value`` CSV export of a calculated study.

The row order is fixed: the eight study inputs first, then the footprint
metrics prefixed with ``wf_``. No transformation logic lives in the router.
"""

from __future__ import annotations

import csv
import io
from typing import Any

from app.services.csv_study_service import format_csv_number
from footprint import FootprintResult, NormalizedStudy

RESULTS_CSV_HEADER: tuple[str, str] = ("metric", "value")


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_csv_number(value)
    return str(value)


def build_results_rows(study: NormalizedStudy, result: FootprintResult) -> list[tuple[str, Any]]:
    """
    Return the ordered ``(metric, value)`` pairs written to the results CSV.
    """

    return [
        ("production_total_kg", study.production_total_kg),
        ("blue_m3", study.blue_m3),
        ("green_m3", study.green_m3),
        ("grey_enabled", study.grey.enabled),
        ("grey_pollutant", study.grey.pollutant),
        ("grey_load_kg", study.grey.load_kg),
        ("grey_cmax_mg_l", study.grey.cmax_mg_l),
        ("grey_cnat_mg_l", study.grey.cnat_mg_l),
        ("wf_blue_l_per_kg", result.blue_l_per_kg),
        ("wf_green_l_per_kg", result.green_l_per_kg),
        ("wf_grey_l_per_kg", result.grey_l_per_kg),
        ("wf_total_l_per_kg", result.total_l_per_kg),
        ("wf_blue_m3_total", result.blue_m3_total),
        ("wf_green_m3_total", result.green_m3_total),
        ("wf_grey_m3_total", result.grey_m3_total),
        ("wf_total_m3", result.total_m3),
    ]


def build_results_csv(study: NormalizedStudy, result: FootprintResult) -> str:
    """
    Render the study and its footprint as a two-column CSV document.
    """

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(RESULTS_CSV_HEADER)
    for metric, value in build_results_rows(study, result):
        writer.writerow((metric, _format_value(value)))
    return buffer.getvalue()
