"""Validates the structured extractor's metric candidates.

The backend returns loosely typed dicts. Only candidates with a non-empty
name and a finite numeric value survive; the rest are dropped with a log
line and never reach the store.
"""

import logging
from typing import Any, List

from pydantic import ValidationError

from finstatements.domain.errors import ExtractionFailed
from finstatements.domain.ingestion import IngestionState
from finstatements.engines.backend import BACKEND_ERRORS, ExtractionBackend
from finstatements.schemas.metric import ExtractedMetric

logger = logging.getLogger(__name__)


class MetricExtractor:
    """Backend call → validate → keep order."""

    def __init__(self, backend: ExtractionBackend):
        self.backend = backend

    def extract(self, text: str) -> List[ExtractedMetric]:
        """Return the validated metrics found in ``text``.

        Raises:
            ExtractionFailed: the backend call itself failed.
        """
        try:
            candidates = self.backend.extract_financial_data(text)
        except BACKEND_ERRORS as exc:
            raise ExtractionFailed(
                f"Structured extraction failed: {exc}",
                state=IngestionState.TEXT_EXTRACTED,
            ) from exc

        if not isinstance(candidates, list):
            logger.warning("Extractor returned %s, expected a list", type(candidates).__name__)
            return []

        metrics = [m for m in (self._validate(c) for c in candidates) if m is not None]
        logger.info("Metric candidates: %d raw → %d valid", len(candidates), len(metrics))
        return metrics

    @staticmethod
    def _validate(candidate: Any) -> ExtractedMetric | None:
        if not isinstance(candidate, dict):
            logger.warning("Skipping non-object metric candidate: %r", candidate)
            return None
        try:
            return ExtractedMetric.model_validate(candidate)
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid metric candidate %r: %d error(s)",
                candidate,
                exc.error_count(),
            )
            return None
