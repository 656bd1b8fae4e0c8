"""
app/services/study_document.py

JSON study documents: the import/export file format of the study wizard.

A document is either a bare study object or ``{"study": {...}}``; anything
else at the root is rejected before normalization.
"""

from __future__ import annotations

import json
from typing import Any

from footprint import NormalizationResult, NormalizedStudy, StudyNormalizer


class StudyDocumentError(ValueError):
    """
    Raised when a study document is not valid JSON or not a JSON object.
    """


def extract_study_candidate(payload: Any) -> Any:
    """
    Return the study part of a decoded document or request body.
    """

    if isinstance(payload, dict) and payload.get("study") is not None:
        return payload["study"]
    return payload


def load_study_document(text: str, *, normalizer: StudyNormalizer | None = None) -> NormalizationResult:
    """
    Parse and normalize one JSON study document.

    Raises
    ------
    StudyDocumentError
        If *text* is not JSON or its root is not an object.
    """

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StudyDocumentError(f"Study document is not valid JSON: {exc.msg}") from exc

    if not isinstance(payload, dict):
        raise StudyDocumentError("Study document root must be a JSON object.")

    return (normalizer or StudyNormalizer()).normalize(extract_study_candidate(payload))


def dump_study_document(study: NormalizedStudy) -> str:
    """
    Serialise *study* as an importable JSON document.
    """

    return json.dumps({"study": study.to_dict()}, indent=2, ensure_ascii=False) + "\n"
