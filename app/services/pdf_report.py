"""
app/services/pdf_report.py

PDF report of a calculated study (A4, Helvetica, text only).
"""

from __future__ import annotations

import io
from typing import Iterable

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from app.config import DEFAULT_REPORT_TITLE
from footprint import FootprintResult, Issue, NormalizedStudy

BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
BODY_SIZE = 11
LINE_HEIGHT = 14
MARGIN_X = 50
TOP_Y = 790
BOTTOM_Y = 60

METHODOLOGY_REFERENCES: tuple[str, ...] = (
    "The Water Footprint Assessment Manual (formula componente gris)",
    "Bases reguladoras Retos 2026 EDIH (contexto de agricultura intensiva)",
)


def format_report_number(value: float) -> str:
    """Integers without decimals, everything else with 3 decimals."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}"


def build_report_lines(
    study: NormalizedStudy,
    result: FootprintResult,
    warnings: Iterable[Issue],
) -> list[str]:
    """
    Return the body lines of the report, title excluded.
    """

    grey = study.grey
    lines = [
        f"Produccion total (kg): {format_report_number(study.production_total_kg)}",
        f"Agua azul (m3): {format_report_number(study.blue_m3)}",
        f"Agua verde (m3): {format_report_number(study.green_m3)}",
        f"Gris habilitada: {'Si' if grey.enabled else 'No'}",
        f"Contaminante: {grey.pollutant or 'N/A'}",
        f"Carga contaminante (kg): {format_report_number(grey.load_kg)}",
        f"Cmax (mg/L): {format_report_number(grey.cmax_mg_l)}",
        f"Cnat (mg/L): {format_report_number(grey.cnat_mg_l)}",
        "",
        f"WF azul (L/kg): {format_report_number(result.blue_l_per_kg)}",
        f"WF verde (L/kg): {format_report_number(result.green_l_per_kg)}",
        f"WF gris (L/kg): {format_report_number(result.grey_l_per_kg)}",
        f"WF total (L/kg): {format_report_number(result.total_l_per_kg)}",
        "",
        f"Volumen azul (m3): {format_report_number(result.blue_m3_total)}",
        f"Volumen verde (m3): {format_report_number(result.green_m3_total)}",
        f"Volumen gris (m3): {format_report_number(result.grey_m3_total)}",
        f"Volumen total (m3): {format_report_number(result.total_m3)}",
        "",
        "Referencia metodologica base:",
    ]
    lines.extend(f"- {reference}" for reference in METHODOLOGY_REFERENCES)

    warning_lines = [f"- {warning.message}" for warning in warnings]
    if warning_lines:
        lines.append("")
        lines.append("Advertencias:")
        lines.extend(warning_lines)

    return lines


def _ensure_y(c: canvas.Canvas, y: float) -> float:
    if y < BOTTOM_Y:
        c.showPage()
        c.setFont(BODY_FONT, BODY_SIZE)
        return TOP_Y
    return y


def _wrap_line(c: canvas.Canvas, text: str, max_width: float) -> list[str]:
    if not text:
        return [""]
    wrapped: list[str] = []
    line = ""
    for word in text.split():
        candidate = f"{line} {word}".strip()
        if c.stringWidth(candidate, BODY_FONT, BODY_SIZE) <= max_width or not line:
            line = candidate
            continue
        wrapped.append(line)
        line = word
    wrapped.append(line)
    return wrapped


def build_study_pdf(
    study: NormalizedStudy,
    result: FootprintResult,
    warnings: Iterable[Issue] = (),
    *,
    title: str = DEFAULT_REPORT_TITLE,
) -> bytes:
    """
    Render the study report and return the PDF document bytes.
    """

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(title)
    width, _height = A4
    max_width = width - 2 * MARGIN_X

    y = TOP_Y
    c.setFont(BOLD_FONT, 14)
    c.drawString(MARGIN_X, y, title)
    y -= LINE_HEIGHT * 2

    c.setFont(BODY_FONT, BODY_SIZE)
    for line in build_report_lines(study, result, warnings):
        for chunk in _wrap_line(c, line, max_width):
            y = _ensure_y(c, y)
            c.drawString(MARGIN_X, y, chunk)
            y -= LINE_HEIGHT

    c.showPage()
    c.save()
    return buffer.getvalue()
