"""
tests/test_exports.py

Unit tests for the results CSV, the PDF report and JSON study documents.
"""

from __future__ import annotations

import csv
import io
import json

import pytest

from app.services.export_service import build_results_csv, build_results_rows
from app.services.pdf_report import build_report_lines, build_study_pdf, format_report_number
from app.services.study_document import (
    StudyDocumentError,
    dump_study_document,
    extract_study_candidate,
    load_study_document,
)
from footprint import (
    REFERENCE_STUDY,
    SEVERITY_WARNING,
    GreyComponent,
    Issue,
    NormalizedStudy,
    calculate,
)


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


class TestResultsCsv:
    def test_reference_study_rows(self) -> None:
        rows = _rows(build_results_csv(REFERENCE_STUDY, calculate(REFERENCE_STUDY)))

        assert rows[0] == ["metric", "value"]
        values = dict(rows[1:])
        assert values["production_total_kg"] == "10000"
        assert values["grey_enabled"] == "true"
        assert values["grey_pollutant"] == "Nitratos (NO3-)"
        assert values["grey_cnat_mg_l"] == "5"
        assert values["wf_blue_l_per_kg"] == "550"
        assert values["wf_grey_l_per_kg"] == "26.667"
        assert values["wf_total_l_per_kg"] == "796.667"
        assert values["wf_total_m3"] == "7966.667"

    def test_row_order(self) -> None:
        metrics = [metric for metric, _ in build_results_rows(REFERENCE_STUDY, calculate(REFERENCE_STUDY))]

        assert metrics[:8] == [
            "production_total_kg",
            "blue_m3",
            "green_m3",
            "grey_enabled",
            "grey_pollutant",
            "grey_load_kg",
            "grey_cmax_mg_l",
            "grey_cnat_mg_l",
        ]
        assert all(metric.startswith("wf_") for metric in metrics[8:])
        assert len(metrics) == 16

    def test_values_with_commas_and_quotes_are_escaped(self) -> None:
        study = NormalizedStudy(
            production_total_kg=100.0,
            blue_m3=1.0,
            green_m3=1.0,
            grey=GreyComponent(enabled=False, pollutant='Nitratos, "NO3"'),
        )

        text = build_results_csv(study, calculate(study))

        assert '"Nitratos, ""NO3"""' in text
        assert dict(_rows(text)[1:])["grey_pollutant"] == 'Nitratos, "NO3"'


class TestPdfReport:
    def test_pdf_bytes(self) -> None:
        pdf = build_study_pdf(REFERENCE_STUDY, calculate(REFERENCE_STUDY))

        assert pdf.startswith(b"%PDF-")
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_report_lines(self) -> None:
        lines = build_report_lines(REFERENCE_STUDY, calculate(REFERENCE_STUDY), [])

        assert "Produccion total (kg): 10000" in lines
        assert "Gris habilitada: Si" in lines
        assert "WF gris (L/kg): 26.667" in lines
        assert "WF total (L/kg): 796.667" in lines
        assert "Advertencias:" not in lines
        assert any("Water Footprint Assessment Manual" in line for line in lines)

    def test_warnings_section(self) -> None:
        warning = Issue(field="grey.cnat_mg_l", message="Cnat no informado.", severity=SEVERITY_WARNING)

        lines = build_report_lines(REFERENCE_STUDY, calculate(REFERENCE_STUDY), [warning])

        assert lines[-2:] == ["Advertencias:", "- Cnat no informado."]

    def test_missing_pollutant_reads_na(self) -> None:
        study = NormalizedStudy(production_total_kg=10.0, blue_m3=1.0, green_m3=0.0)
        lines = build_report_lines(study, calculate(study), [])
        assert "Contaminante: N/A" in lines
        assert "Gris habilitada: No" in lines

    def test_many_warnings_span_pages(self) -> None:
        warnings = [
            Issue(field="csv", message=f"Advertencia numero {index} " * 6, severity=SEVERITY_WARNING)
            for index in range(80)
        ]

        pdf = build_study_pdf(REFERENCE_STUDY, calculate(REFERENCE_STUDY), warnings)

        assert pdf.count(b"/Type /Page") - pdf.count(b"/Type /Pages") >= 2

    @pytest.mark.parametrize(
        "value, expected",
        [(10000.0, "10000"), (26.667, "26.667"), (0.5, "0.500"), (0.0, "0")],
    )
    def test_format_report_number(self, value: float, expected: str) -> None:
        assert format_report_number(value) == expected


class TestStudyDocument:
    def test_round_trip(self) -> None:
        result = load_study_document(dump_study_document(REFERENCE_STUDY))

        assert result.study == REFERENCE_STUDY
        assert result.issues == []

    def test_bare_study_object(self) -> None:
        document = json.dumps(REFERENCE_STUDY.to_dict())
        assert load_study_document(document).study == REFERENCE_STUDY

    def test_dump_wraps_in_study_key(self) -> None:
        payload = json.loads(dump_study_document(REFERENCE_STUDY))
        assert payload["study"]["grey"]["pollutant"] == "Nitratos (NO3-)"

    @pytest.mark.parametrize("text", ["", "{not json", "[1, 2]", '"study"'])
    def test_invalid_documents(self, text: str) -> None:
        with pytest.raises(StudyDocumentError):
            load_study_document(text)

    def test_invalid_study_yields_issues(self) -> None:
        result = load_study_document(
            '{"study": {"production_total_kg": -1, "blue_m3": 1, "green_m3": 1, "grey": {}}}'
        )

        assert result.study is None
        assert [issue.field for issue in result.issues] == ["production_total_kg"]

    def test_extract_study_candidate(self) -> None:
        assert extract_study_candidate({"study": {"a": 1}}) == {"a": 1}
        assert extract_study_candidate({"study": None, "blue_m3": 1}) == {"study": None, "blue_m3": 1}
        assert extract_study_candidate([1]) == [1]
