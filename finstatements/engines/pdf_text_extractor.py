"""Local PDF text extraction."""

import logging
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from finstatements.domain.errors import ExtractionFailed
from finstatements.domain.ingestion import IngestionState

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """Turns PDF bytes into plain text, one line break after every page."""

    def extract(self, data: bytes) -> str:
        """Concatenate the text of every page in order.

        A two-page document reading "Revenue: 100" and "Costs: 40" yields
        ``"Revenue: 100\\nCosts: 40\\n"``. Pages without a text layer
        contribute an empty string.

        Raises:
            ExtractionFailed: the bytes are not a readable PDF.
        """
        try:
            reader = PdfReader(BytesIO(data))
            pages = [(page.extract_text() or "") + "\n" for page in reader.pages]
        except (PyPdfError, ValueError, KeyError, TypeError) as exc:
            logger.warning("PDF parsing failed: %s", exc)
            raise ExtractionFailed(
                f"Could not read PDF: {exc}", state=IngestionState.ACQUIRING
            ) from exc

        text = "".join(pages)
        logger.info("Extracted %d chars from %d PDF pages", len(text), len(pages))
        return text
