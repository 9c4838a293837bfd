"""Client for the hosted file archive that keeps every uploaded statement."""

import logging

from finstatements.clients.base_client import BaseHTTPClient, ServiceError

logger = logging.getLogger(__name__)


class ArchiveClient(BaseHTTPClient):
    """Stores uploaded documents in one remote archive."""

    def __init__(self, base_url: str, archive_id: str, **kwargs):
        super().__init__(base_url=base_url, **kwargs)
        self.archive_id = archive_id

    def store(self, filename: str, data: bytes, content_type: str = "application/pdf") -> str:
        """Upload ``data`` and return the handle used to retrieve it later.

        Raises:
            ServiceError: the archive did not report success.
        """
        if not self.archive_id:
            raise ServiceError("No archive configured")

        reply = self._post(
            f"archives/{self.archive_id}",
            files={"file": (filename, data, content_type)},
        )

        first = reply[0] if isinstance(reply, list) and reply else None
        if not isinstance(first, dict) or first.get("status") != "success":
            raise ServiceError(f"Archive rejected upload of {filename}")

        logger.info("Archived %s (%d bytes)", filename, len(data))
        return filename
