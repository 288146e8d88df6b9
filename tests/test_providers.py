"""
Tests for text oracle providers.
"""

import pytest
import json

from persona_quiz.providers import get_provider, GeminiProvider, ClaudeProvider, DeepSeekProvider
from persona_quiz.providers.base import (
    ModelResponse,
    ProviderError,
    QuotaExceededError,
    ServiceUnavailableError,
    AuthenticationError,
    classify_error,
)
from persona_quiz.providers.mock import (
    MockProvider,
    generate_mock_questions,
    generate_mock_analysis,
    generate_mock_followup,
)


class SdkStatusError(Exception):
    """Stand-in for SDK errors that carry an HTTP status."""

    def __init__(self, message, status_code=None, code=None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class TestMockProvider:
    """Tests for MockProvider."""

    @pytest.mark.asyncio
    async def test_basic_generate(self):
        """Test basic response generation."""
        provider = MockProvider(fixed_response="Hello, world!")
        response = await provider.generate("Test prompt")

        assert response.content == "Hello, world!"
        assert response.provider == "mock"
        assert response.model == "mock-model-v1"

    @pytest.mark.asyncio
    async def test_custom_response_generator(self):
        """Test custom response generator."""
        def my_generator(prompt: str) -> str:
            return f"Response to: {prompt}"

        provider = MockProvider(response_generator=my_generator)
        response = await provider.generate("Hello")

        assert response.content == "Response to: Hello"

    @pytest.mark.asyncio
    async def test_scripted_responses_repeat_last(self):
        """Scripted responses are served in order, then the last one repeats."""
        provider = MockProvider(responses=["first", "second"])

        contents = [(await provider.generate("x")).content for _ in range(3)]

        assert contents == ["first", "second", "second"]

    @pytest.mark.asyncio
    async def test_question_detection(self):
        """Question prompts get numbered question text."""
        provider = MockProvider()
        response = await provider.generate("Generate 10 multiple choice questions with 4 options each.")

        assert response.content.startswith("1. ")
        assert "d) " in response.content

    @pytest.mark.asyncio
    async def test_question_detection_json(self):
        """JSON output requests get the structured shape."""
        provider = MockProvider(json_capable=True)
        response = await provider.generate(
            "Generate 10 multiple choice questions with 4 options each.",
            json_output=True,
        )

        data = json.loads(response.content)
        assert len(data["questions"]) == 10

    @pytest.mark.asyncio
    async def test_followup_detection(self):
        """Follow-up prompts get the three follow-up sections."""
        provider = MockProvider()
        response = await provider.generate("Previous Analysis:\nstuff\n\nFollow-up question:\nwhy?")

        assert "Direct Answer" in response.content
        assert "Additional Insights" in response.content

    @pytest.mark.asyncio
    async def test_simulated_failure(self):
        """Test simulated failures."""
        provider = MockProvider(fail_rate=1.0)

        with pytest.raises(ProviderError):
            await provider.generate("Test")

    @pytest.mark.asyncio
    async def test_configured_error(self):
        """A configured error is raised on every call and still recorded."""
        provider = MockProvider(error=QuotaExceededError("slow down"))

        for _ in range(2):
            with pytest.raises(QuotaExceededError):
                await provider.generate("Test")

        assert provider.call_count == 2

    @pytest.mark.asyncio
    async def test_calls_recorded(self):
        """Sampling parameters are captured per call."""
        provider = MockProvider(fixed_response="ok")
        await provider.generate("Prompt", temperature=0.9, top_k=40, top_p=0.95, max_tokens=512)

        call = provider.calls[0]
        assert call["prompt"] == "Prompt"
        assert call["temperature"] == 0.9
        assert call["top_k"] == 40
        assert call["max_tokens"] == 512

    @pytest.mark.asyncio
    async def test_usage_tracking(self):
        """Test token usage tracking."""
        provider = MockProvider(fixed_response="Test", token_count=50)
        response = await provider.generate("Hello world")

        assert response.output_tokens == 50
        assert response.input_tokens > 0


class TestMockGenerators:
    """Tests for mock content helpers."""

    def test_generate_mock_questions(self):
        """Numbered blocks with four lettered options each."""
        text = generate_mock_questions(count=3)
        blocks = text.split("\n\n")

        assert len(blocks) == 3
        assert blocks[2].startswith("3. ")
        assert all(len(block.split("\n")) == 5 for block in blocks)

    def test_generate_mock_questions_wraps_topics(self):
        """More questions than topics still yields the requested count."""
        data = json.loads(generate_mock_questions(count=15, as_json=True))

        assert len(data["questions"]) == 15

    def test_generate_mock_analysis_sections(self):
        """Requested section headers appear in bold markdown."""
        text = generate_mock_analysis(["Shikai", "Bankai"])

        assert "**Shikai:**" in text
        assert "**Bankai:**" in text

    def test_generate_mock_followup(self):
        text = generate_mock_followup()
        assert "Explanation" in text


class TestClassifyError:
    """Tests for mapping SDK errors onto the provider taxonomy."""

    def test_quota(self):
        error = classify_error("gemini", Exception("429 RESOURCE_EXHAUSTED"))
        assert isinstance(error, QuotaExceededError)
        assert error.retryable is True

    def test_auth_not_retryable(self):
        error = classify_error("claude", Exception("401 invalid x-api-key"))
        assert isinstance(error, AuthenticationError)
        assert error.retryable is False

    def test_unavailable(self):
        error = classify_error("deepseek", Exception("503 Service Unavailable"))
        assert isinstance(error, ServiceUnavailableError)

    def test_words_inside_other_words_ignored(self):
        """'generate' is not a rate limit and 'author' is not an auth failure."""
        error = classify_error("gemini", Exception("generateContent failed for author field, moderate load"))
        assert type(error) is ProviderError

    def test_permission_denied_fails_fast(self):
        error = classify_error("gemini", Exception("PERMISSION_DENIED: generateContent is not allowed"))
        assert isinstance(error, AuthenticationError)

    def test_status_code_wins_over_message(self):
        """An SDK status code decides even when the message says otherwise."""
        error = classify_error("claude", SdkStatusError("rate of generateContent", status_code=403))
        assert isinstance(error, AuthenticationError)

        error = classify_error("gemini", SdkStatusError("quota", code=503))
        assert isinstance(error, ServiceUnavailableError)

        error = classify_error("deepseek", SdkStatusError("api key invalid", status_code=400))
        assert type(error) is ProviderError

    def test_unknown(self):
        error = classify_error("gemini", Exception("something odd"))
        assert type(error) is ProviderError
        assert "gemini" in str(error)


class TestGetProvider:
    """Tests for the provider factory."""

    def test_known_providers(self):
        assert isinstance(get_provider("gemini", api_key="k"), GeminiProvider)
        assert isinstance(get_provider("claude", api_key="k"), ClaudeProvider)
        assert isinstance(get_provider("deepseek", api_key="k"), DeepSeekProvider)
        assert isinstance(get_provider("mock"), MockProvider)

    def test_model_override(self):
        assert get_provider("mock", model="other").default_model == "other"
        assert get_provider("gemini", model="gemini-x", api_key="k").default_model == "gemini-x"

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            get_provider("nope")

    def test_missing_credential(self, monkeypatch):
        """Credential checks fail fast without touching the network."""
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        with pytest.raises(AuthenticationError):
            GeminiProvider().check_credentials()

    def test_json_support(self):
        assert GeminiProvider(api_key="k").supports_json_output is True
        assert MockProvider().supports_json_output is False


class TestModelResponse:
    """Tests for ModelResponse."""

    def test_token_properties(self):
        """Test token counting properties."""
        response = ModelResponse(
            content="test",
            model="test-model",
            provider="test",
            usage={"input_tokens": 100, "output_tokens": 50},
        )

        assert response.input_tokens == 100
        assert response.output_tokens == 50
        assert response.total_tokens == 150

    def test_empty_usage(self):
        """Test with empty usage dict."""
        response = ModelResponse(content="test", model="test-model", provider="test")

        assert response.total_tokens == 0
