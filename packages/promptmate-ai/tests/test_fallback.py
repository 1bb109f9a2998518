"""Tests for the offline fallback rewrite"""
import pytest

from promptmate_ai.fallback import fallback_rewrite, mock_response, MOCK_NOTE
from promptmate_ai.instructions import (
    TONE_INSTRUCTIONS,
    TYPE_INSTRUCTIONS,
    build_system_prompt,
    build_rewrite_request,
)
from promptmate_ai.result import RewriteResult, classify_failure


class TestFallbackRewrite:
    """Tests for fallback_rewrite"""

    def test_capitalizes_and_expands(self):
        """Test pronoun and first-letter capitalization plus u -> you"""
        result = fallback_rewrite("can u help me, i am stuck", "professional", "other")
        assert result == "Can you help me, I am stuck."

    def test_collapses_whitespace(self):
        result = fallback_rewrite("  hello \n\n   world  ", "professional", "message")
        assert result == "Hello world."

    def test_keeps_existing_terminal_punctuation(self):
        assert fallback_rewrite("is this ok?", "professional", "other") == "Is this ok?"
        assert fallback_rewrite("great!", "professional", "other") == "Great!"

    def test_does_not_touch_words_containing_u_or_i(self):
        result = fallback_rewrite("run it if u insist", "concise", "other")
        assert result == "Run it if you insist."

    def test_tone_wrappers(self):
        assert fallback_rewrite("hi", "formal", "other") == (
            "I would like to formally request assistance with the following: Hi."
        )
        assert fallback_rewrite("hi", "friendly", "other") == "Hi there! Hi. Hope this helps!"
        assert fallback_rewrite("hi", "casual", "other") == "Hey, Hi."

    def test_email_template(self):
        result = fallback_rewrite("please send the file", "professional", "email")
        assert result.startswith("Subject: Request for Assistance\n\nDear [Recipient],\n\n")
        assert "Please send the file." in result
        assert result.endswith("Best regards,\n[Your Name]")

    @pytest.mark.parametrize("prompt_type", [t for t in TYPE_INSTRUCTIONS if t != "email"])
    @pytest.mark.parametrize("tone", list(TONE_INSTRUCTIONS))
    def test_result_ends_with_punctuation(self, tone, prompt_type):
        """Non-email output always ends in terminal punctuation"""
        result = fallback_rewrite("some text without an ending", tone, prompt_type)
        assert result[-1] in ".!?"

    def test_deterministic(self):
        assert fallback_rewrite("abc  def", "casual", "email") == fallback_rewrite("abc  def", "casual", "email")


class TestMockResponse:
    """Tests for mock_response"""

    def test_metadata(self):
        result = mock_response("hello there", "casual", "message")

        assert result.success is True
        assert result.rewritten_prompt == "Hey, Hello there."
        assert result.metadata["model"] == "mock"
        assert result.metadata["apiCost"] == 0
        assert result.metadata["tone"] == "casual"
        assert result.metadata["type"] == "message"
        assert result.metadata["originalLength"] == len("hello there")
        assert result.metadata["rewrittenLength"] == len(result.rewritten_prompt)
        assert result.metadata["note"] == MOCK_NOTE
        assert result.metadata["processingTime"] >= 0


class TestInstructions:
    """Tests for the rewrite prompt builders"""

    def test_system_prompt_contains_both_instructions(self):
        prompt = build_system_prompt("formal", "report")
        assert TONE_INSTRUCTIONS["formal"] in prompt
        assert TYPE_INSTRUCTIONS["report"] in prompt

    def test_unknown_values_fall_back_to_defaults(self):
        prompt = build_system_prompt("sarcastic", "poem")
        assert TONE_INSTRUCTIONS["professional"] in prompt
        assert TYPE_INSTRUCTIONS["other"] in prompt

    def test_request_quotes_original(self):
        request = build_rewrite_request("fix this", "concise", "summary")
        assert request.endswith('"fix this"')


class TestClassifyFailure:
    """Tests for failure classification"""

    @pytest.mark.parametrize("detail,expected", [
        ("ConnectError: [Errno -2] Name or service not known", "network"),
        ("TypeError: fetch failed", "network"),
        ("Request timeout after 30 seconds", "timeout"),
        ("ReadTimeout: timed out", "timeout"),
        ("Gemini API error 400: API key not valid. Please pass a valid API key.", "auth"),
        ("Gemini API error 500: Internal error", "unknown"),
        ("", "unknown"),
    ])
    def test_classification(self, detail, expected):
        assert classify_failure(detail) == expected

    def test_network_wins_over_timeout(self):
        """Network markers are checked first"""
        assert classify_failure("connection timeout") == "network"


class TestRewriteResult:
    """Tests for RewriteResult.to_dict"""

    def test_failure_dict_includes_fallback(self):
        fallback = mock_response("hi", "professional", "other")
        result = RewriteResult(
            success=False,
            error="Request timed out - please try again",
            error_type="timeout",
            details="Request timeout after 30 seconds",
            fallback=fallback,
        )

        data = result.to_dict()

        assert data["success"] is False
        assert data["errorType"] == "timeout"
        assert data["fallback"]["rewrittenPrompt"] == "Hi."
        assert "rewrittenPrompt" not in data
