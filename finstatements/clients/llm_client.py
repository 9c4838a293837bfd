"""Wrapper around the Anthropic Claude API, used as an alternative extraction backend.

Exposes the same two calls as ``PromptClient`` so the engines do not care
which backend produced the candidates.
"""

import json
import logging
import re
from typing import List, Optional

import anthropic

from finstatements.prompts.manager import PromptManager
from finstatements.utils.retry import with_retry

logger = logging.getLogger(__name__)

EXTRACTION_TEMPLATE = "metric_extraction"
DETECTION_TEMPLATE = "inconsistency_detection"

_RETRY_ON = (
    anthropic.APITimeoutError,
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)
_NO_RETRY = (
    anthropic.BadRequestError,
    anthropic.AuthenticationError,
)


class LLMResponseError(ValueError):
    """Claude answered, but not with a JSON array."""


class LLMClient:
    """Sends statement text and metric lists to Claude.

    Responsibilities:
    - Render the versioned system prompts
    - Parse the JSON array out of the reply
    - Track token usage
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        retry_max_attempts: int = 1,
        prompt_manager: Optional[PromptManager] = None,
        client: Optional[anthropic.Anthropic] = None,
    ):
        self.client = client or anthropic.Anthropic(api_key=api_key)
        self.model = model
        self.prompts = prompt_manager or PromptManager()
        self.total_input_tokens: int = 0
        self.total_output_tokens: int = 0
        self._retry_max_attempts = retry_max_attempts

    def extract_financial_data(self, text: str) -> List[dict]:
        """Candidate metrics from statement text (unvalidated)."""
        user_message = (
            "Extract every financial metric from this statement.\n\n"
            f"Statement text:\n{text}"
        )
        return self._ask(EXTRACTION_TEMPLATE, user_message)

    def detect_inconsistencies(self, financial_data: List[dict]) -> List[dict]:
        """Candidate data-quality issues for extracted metrics (unvalidated).

        Raises:
            LLMResponseError: reply did not contain a JSON array.
        """
        user_message = (
            "Review these extracted metrics for inconsistencies.\n\n"
            f"Metrics:\n{json.dumps(financial_data, indent=2)}"
        )
        return self._ask(DETECTION_TEMPLATE, user_message)

    def close(self) -> None:
        self.client.close()

    # ── internal ─────────────────────────────────────────────────────

    def _ask(self, template: str, user_message: str) -> List[dict]:
        system_prompt = self.prompts.get(template)

        @with_retry(
            max_attempts=self._retry_max_attempts,
            initial_delay=2.0,
            retry_on=_RETRY_ON,
            reraise_on=_NO_RETRY,
        )
        def _create():
            return self.client.messages.create(
                model=self.model,
                max_tokens=8192,
                system=system_prompt,
                messages=[{"role": "user", "content": user_message}],
            )

        message = _create()
        self.total_input_tokens += message.usage.input_tokens
        self.total_output_tokens += message.usage.output_tokens

        return self._parse_array(self._reply_text(message))

    @staticmethod
    def _reply_text(message) -> str:
        """Join the text blocks of a reply; tool-use and other blocks are ignored."""
        parts = [
            block.text
            for block in (message.content or [])
            if getattr(block, "type", None) == "text"
        ]
        if not parts:
            raise LLMResponseError("Model response contained no text")
        return "".join(parts)

    @staticmethod
    def _parse_array(text: str) -> List[dict]:
        """Pull a JSON array out of potentially messy model output.

        Handles a raw array, an array inside ```json fences, and an array
        buried in prose.
        """
        fenced = re.search(r"```(?:json)?\s*(\[[\s\S]*?\])\s*```", text)
        if fenced:
            try:
                return json.loads(fenced.group(1))
            except json.JSONDecodeError:
                pass

        stripped = text.strip()
        if stripped.startswith("["):
            try:
                return json.loads(stripped)
            except json.JSONDecodeError:
                pass

        found = re.search(r"\[[\s\S]*\]", text)
        if found:
            try:
                return json.loads(found.group(0))
            except json.JSONDecodeError:
                pass

        logger.error("No JSON array in model response (first 300 chars): %s", text[:300])
        raise LLMResponseError("Model response did not contain a JSON array")
