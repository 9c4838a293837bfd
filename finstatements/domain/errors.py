"""Error taxonomy for statement ingestion.

``AcquisitionFailed``, ``ExtractionFailed`` and ``PersistenceFailed`` abort
the pipeline and reach the caller. ``DetectionFailed`` is raised by the
inconsistency detector and downgraded to "no inconsistencies" by the
ingestion service.
"""

from typing import Optional

from finstatements.domain.ingestion import IngestionState


class IngestionError(Exception):
    """Base class for every ingestion failure.

    Attributes:
        reason: Human-readable cause, shown to the caller.
        state: Pipeline state the failure happened in.
        statement_id: Id of the statement row, if it had been created.
    """

    user_message_prefix = "Error processing financial statement"

    def __init__(
        self,
        reason: str,
        *,
        state: IngestionState = IngestionState.ACQUIRING,
        statement_id: Optional[int] = None,
    ):
        super().__init__(reason)
        self.reason = reason
        self.state = state
        self.statement_id = statement_id

    @property
    def user_message(self) -> str:
        return f"{self.user_message_prefix}: {self.reason}"


class AcquisitionFailed(IngestionError):
    """Bad or missing input, unknown company, archive failure or URL fetch failure."""


class ExtractionFailed(IngestionError):
    """The document text or its structured data could not be extracted."""


class DetectionFailed(IngestionError):
    """The inconsistency detector failed; never fatal."""


class PersistenceFailed(IngestionError):
    """The metric store rejected or could not complete a write."""


class UnknownCompany(AcquisitionFailed):
    """The statement references a company that does not exist."""
