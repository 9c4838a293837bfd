"""Runs the inconsistency detector over validated metrics."""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from finstatements.domain.errors import DetectionFailed
from finstatements.domain.ingestion import IngestionState
from finstatements.engines.backend import BACKEND_ERRORS, ExtractionBackend
from finstatements.schemas.inconsistency import DetectedInconsistency
from finstatements.schemas.metric import ExtractedMetric

logger = logging.getLogger(__name__)


class InconsistencyDetector:
    def __init__(self, backend: ExtractionBackend):
        self.backend = backend

    def detect(
        self,
        metrics: List[ExtractedMetric],
        statement_id: Optional[int] = None,
    ) -> List[DetectedInconsistency]:
        """Return the well-formed inconsistencies reported for ``metrics``.

        Entries missing a type or description are dropped; unknown
        severities become ``medium``.

        Raises:
            DetectionFailed: transport error, timeout or unusable reply.
        """
        payload = [m.as_payload() for m in metrics]
        try:
            candidates = self.backend.detect_inconsistencies(payload)
        except BACKEND_ERRORS as exc:
            raise DetectionFailed(
                f"Inconsistency detection failed: {exc}",
                state=IngestionState.DATA_EXTRACTED,
                statement_id=statement_id,
            ) from exc

        if not isinstance(candidates, list):
            raise DetectionFailed(
                f"Detector returned {type(candidates).__name__}, expected a list",
                state=IngestionState.DATA_EXTRACTED,
                statement_id=statement_id,
            )

        found = [i for i in (self._validate(c) for c in candidates) if i is not None]
        logger.info(
            "Statement %s: %d inconsistency candidates → %d valid",
            statement_id,
            len(candidates),
            len(found),
        )
        return found

    @staticmethod
    def _validate(candidate: Any) -> DetectedInconsistency | None:
        if not isinstance(candidate, dict):
            return None
        try:
            return DetectedInconsistency.model_validate(candidate)
        except ValidationError:
            logger.warning("Skipping malformed inconsistency: %r", candidate)
            return None
