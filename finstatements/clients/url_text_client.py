"""Client that asks the hosted service to download a document and return its text."""

import logging

from finstatements.clients.base_client import BaseHTTPClient, ServiceError

logger = logging.getLogger(__name__)


class UrlTextClient(BaseHTTPClient):
    def fetch_text(self, url: str) -> str:
        """Return the text content of the document at ``url``.

        Raises:
            ServiceError: the reply carries no text.
        """
        reply = self._post("get_data_from_url", json={"input_data": url})
        text = reply.get("text") if isinstance(reply, dict) else None
        if not isinstance(text, str):
            raise ServiceError(f"No text returned for {url}")
        logger.info("Fetched %d chars from %s", len(text), url)
        return text
