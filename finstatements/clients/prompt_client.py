"""Client for the hosted prompt-execution endpoint (``apply_prompt_to_data``).

Both the structured metric extraction and the inconsistency detection are
named prompts run by the remote service; this client only moves data in and
out. Replies are loosely typed JSON, validated later by the engines.
"""

import json
import logging
from typing import Any, Dict, List

from finstatements.clients.base_client import BaseHTTPClient, ServiceError

logger = logging.getLogger(__name__)

EXTRACT_PROMPT = "extract_financial_data"
DETECT_PROMPT = "detect_inconsistencies"


class PromptClient(BaseHTTPClient):
    """Runs named prompts against the hosted AI-tools service."""

    def apply_prompt(self, prompt_name: str, input_data: Dict[str, Any]) -> Any:
        """Run ``prompt_name`` over ``input_data`` and return the structured ``value``."""
        data = self._post(
            "apply_prompt_to_data",
            json={
                "prompt_name": prompt_name,
                "input_data": input_data,
                "return_type": "structured",
            },
        )
        if not isinstance(data, dict) or "value" not in data:
            raise ServiceError(f"Prompt {prompt_name} returned no value")
        return data["value"]

    def extract_financial_data(self, text: str) -> List[dict]:
        """Candidate metrics found in the statement text (unvalidated)."""
        value = self.apply_prompt(EXTRACT_PROMPT, {"pdf_text": text})
        return _as_list(value, EXTRACT_PROMPT)

    def detect_inconsistencies(self, financial_data: List[dict]) -> List[dict]:
        """Candidate data-quality issues for the extracted metrics (unvalidated)."""
        value = self.apply_prompt(
            DETECT_PROMPT, {"financial_data": json.dumps(financial_data)}
        )
        return _as_list(value, DETECT_PROMPT)


def _as_list(value: Any, prompt_name: str) -> List[dict]:
    # Anything that is not an array is treated as "nothing found"
    if isinstance(value, list):
        return value
    logger.warning(
        "Prompt %s returned %s instead of a list; treating as empty",
        prompt_name,
        type(value).__name__,
    )
    return []
