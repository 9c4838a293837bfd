"""Contract shared by the two structured-extraction backends.

``PromptClient`` (hosted prompts) and ``LLMClient`` (Claude) both satisfy
``ExtractionBackend``; the engines only ever see this interface.
"""

from typing import List, Protocol

import anthropic
import httpx

from finstatements.clients.base_client import ServiceError
from finstatements.clients.llm_client import LLMResponseError


class ExtractionBackend(Protocol):
    def extract_financial_data(self, text: str) -> List[dict]: ...

    def detect_inconsistencies(self, financial_data: List[dict]) -> List[dict]: ...


# Everything a backend may raise when the remote side misbehaves
BACKEND_ERRORS = (
    ServiceError,
    LLMResponseError,
    httpx.HTTPError,
    anthropic.APIError,
)
