"""
app/services/study_service.py

Service layer shared by every endpoint that needs a calculated study.

Normalization issues never raise inside the core; this service is the seam
where a blocking issue list becomes a :class:`StudyRejectedError` that the
routers map to an HTTP 400 response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from footprint import (
    FootprintCalculator,
    FootprintResult,
    Issue,
    NormalizedStudy,
    StudyNormalizer,
)

logger = logging.getLogger(__name__)


class StudyRejectedError(ValueError):
    """
    Raised when a study carries at least one blocking issue.
    """

    def __init__(self, issues: list[Issue]) -> None:
        fields = ", ".join(sorted({issue.field for issue in issues if issue.is_blocking}))
        super().__init__(f"Study rejected with blocking issues on: {fields}")
        self.issues = list(issues)


@dataclass(frozen=True)
class StudyEvaluation:
    """
    A normalized study, its footprint and the non-blocking issues found.
    """

    study: NormalizedStudy
    result: FootprintResult
    issues: list[Issue] = field(default_factory=list)

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if not issue.is_blocking]


class StudyService:
    """
    Normalizes a candidate and calculates its footprint in one call.
    """

    def __init__(
        self,
        *,
        normalizer: StudyNormalizer | None = None,
        calculator: FootprintCalculator | None = None,
    ) -> None:
        self._normalizer = normalizer or StudyNormalizer()
        self._calculator = calculator or FootprintCalculator()

    def evaluate(self, candidate: Any) -> StudyEvaluation:
        """
        Normalize and calculate *candidate*.

        Raises
        ------
        StudyRejectedError
            When normalization reports any error-severity issue.
        """

        study, issues = self._accept(candidate)
        result = self._calculator.calculate(study)
        logger.info(
            "Study evaluated total_l_per_kg=%.3f grey_enabled=%s warnings=%d",
            result.total_l_per_kg,
            study.grey.enabled,
            len(issues),
        )
        return StudyEvaluation(study=study, result=result, issues=issues)

    def evaluate_with_result(
        self,
        candidate: Any,
        precomputed: FootprintResult | None,
    ) -> StudyEvaluation:
        """
        Like :meth:`evaluate`, reusing *precomputed* when a caller already
        holds the result for this study (export flows).
        """

        if precomputed is None:
            return self.evaluate(candidate)
        study, issues = self._accept(candidate)
        return StudyEvaluation(study=study, result=precomputed, issues=issues)

    def _accept(self, candidate: Any) -> tuple[NormalizedStudy, list[Issue]]:
        normalization = self._normalizer.normalize(candidate)
        if normalization.study is None or normalization.has_blocking_errors:
            logger.info(
                "Study rejected issues=%s",
                [issue.field for issue in normalization.issues if issue.is_blocking],
            )
            raise StudyRejectedError(normalization.issues)
        return normalization.study, normalization.issues


@lru_cache(maxsize=1)
def get_study_service() -> StudyService:
    """
    Build and cache the shared study service.
    """
    return StudyService()
