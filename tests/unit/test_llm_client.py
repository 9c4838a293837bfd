"""Unit tests for the Claude extraction backend."""

from unittest.mock import MagicMock

import pytest

from finstatements.clients.llm_client import LLMClient, LLMResponseError


def _message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    message = MagicMock()
    message.content = [MagicMock(type="text", text=text)]
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    return message


@pytest.fixture
def anthropic_client():
    return MagicMock()


@pytest.fixture
def llm(anthropic_client):
    return LLMClient(api_key="test", model="claude-test", client=anthropic_client)


class TestExtraction:
    def test_uses_metric_extraction_prompt(self, llm, anthropic_client):
        anthropic_client.messages.create.return_value = _message(
            '[{"metric_name": "total_revenue", "metric_value": 100}]'
        )

        result = llm.extract_financial_data("Revenue: 100\n")

        assert result == [{"metric_name": "total_revenue", "metric_value": 100}]
        kwargs = anthropic_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["system"] == llm.prompts.get("metric_extraction")
        assert "Revenue: 100" in kwargs["messages"][0]["content"]

    def test_tracks_token_usage(self, llm, anthropic_client):
        anthropic_client.messages.create.return_value = _message("[]", 120, 30)

        llm.extract_financial_data("a")
        llm.extract_financial_data("b")

        assert llm.total_input_tokens == 240
        assert llm.total_output_tokens == 60


class TestDetection:
    def test_uses_inconsistency_prompt_and_sends_metrics(self, llm, anthropic_client):
        anthropic_client.messages.create.return_value = _message(
            '```json\n[{"type": "sum_mismatch", "description": "x", "severity": "high"}]\n```'
        )

        result = llm.detect_inconsistencies([{"metric_name": "total_revenue", "metric_value": 1.0}])

        assert result[0]["type"] == "sum_mismatch"
        kwargs = anthropic_client.messages.create.call_args.kwargs
        assert kwargs["system"] == llm.prompts.get("inconsistency_detection")
        assert '"metric_name": "total_revenue"' in kwargs["messages"][0]["content"]


class TestParseArray:
    def test_raw_array(self):
        assert LLMClient._parse_array('[{"a": 1}]') == [{"a": 1}]

    def test_fenced_array(self):
        assert LLMClient._parse_array('Here you go:\n```json\n[1, 2]\n```') == [1, 2]

    def test_array_in_prose(self):
        assert LLMClient._parse_array('I found these: [{"a": 1}] hope it helps') == [{"a": 1}]

    def test_empty_array(self):
        assert LLMClient._parse_array("[]") == []

    def test_no_array_raises(self):
        with pytest.raises(LLMResponseError):
            LLMClient._parse_array("I could not find any metrics.")


class TestReplyText:
    def test_joins_text_blocks_and_skips_others(self, llm, anthropic_client):
        message = _message("")
        message.content = [
            MagicMock(type="text", text='[{"metric_name": '),
            MagicMock(type="tool_use"),
            MagicMock(type="text", text='"total_revenue", "metric_value": 1}]'),
        ]
        anthropic_client.messages.create.return_value = message

        assert llm.extract_financial_data("x") == [{"metric_name": "total_revenue", "metric_value": 1}]

    @pytest.mark.parametrize("content", [[], [MagicMock(type="tool_use")]])
    def test_reply_without_text_raises(self, llm, anthropic_client, content):
        message = _message("")
        message.content = content
        anthropic_client.messages.create.return_value = message

        with pytest.raises(LLMResponseError, match="no text"):
            llm.detect_inconsistencies([])
        assert llm.total_input_tokens == 100
