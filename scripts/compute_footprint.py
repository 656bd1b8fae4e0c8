"""
Compute the water footprint of a study file from the CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from app.services.csv_study_service import CSVStudyService
from app.services.study_document import StudyDocumentError, load_study_document
from footprint import REFERENCE_STUDY, Issue, NormalizedStudy, calculate, normalize


def _load(path: Path) -> tuple[NormalizedStudy | None, list[Issue]]:
    text = path.read_text(encoding="utf-8-sig")
    if path.suffix.lower() == ".csv":
        validation = CSVStudyService().validate_csv_study(text)
        return validation.preview, validation.issues
    normalization = load_study_document(text)
    return normalization.study, normalization.issues


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compute the water footprint of a study.")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Study file: JSON document or CSV with the template headers.",
    )
    parser.add_argument(
        "--example",
        action="store_true",
        help="Use the reference greenhouse tomato study.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)
    if args.example == (args.path is not None):
        parser.error("provide either a study file or --example")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if args.example:
        normalization = normalize(REFERENCE_STUDY)
        study, issues = normalization.study, normalization.issues
    else:
        try:
            study, issues = _load(args.path)
        except (OSError, UnicodeDecodeError, StudyDocumentError) as exc:
            parser.error(str(exc))

    payload: dict[str, object] = {"issues": [issue.to_dict() for issue in issues]}
    blocking = study is None or any(issue.is_blocking for issue in issues)
    if not blocking:
        payload["study"] = study.to_dict()
        payload["result"] = calculate(study).to_dict()

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 1 if blocking else 0


if __name__ == "__main__":
    raise SystemExit(main())
