"""
persona-quiz configuration

All magic numbers, API keys, model choices, and behavior settings live here.
Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field
from typing import Literal, Optional


@dataclass
class GenerationSettings:
    """Sampling parameters passed to the oracle for one kind of request"""
    temperature: float = 0.7
    top_k: Optional[int] = 40
    top_p: Optional[float] = 0.95
    max_output_tokens: int = 2048

    def as_kwargs(self) -> dict:
        return {
            "temperature": self.temperature,
            "top_k": self.top_k,
            "top_p": self.top_p,
            "max_tokens": self.max_output_tokens,
        }


@dataclass
class GenerationConfig:
    """Per-purpose sampling. Analysis runs hotter than question generation."""
    questions: GenerationSettings = field(default_factory=lambda: GenerationSettings(
        temperature=float(os.getenv("QUESTIONS_TEMPERATURE", "0.7")),
        top_k=int(os.getenv("QUESTIONS_TOP_K", "40")),
        top_p=float(os.getenv("QUESTIONS_TOP_P", "0.95")),
        max_output_tokens=int(os.getenv("QUESTIONS_MAX_TOKENS", "2048")),
    ))
    analysis: GenerationSettings = field(default_factory=lambda: GenerationSettings(
        temperature=float(os.getenv("ANALYSIS_TEMPERATURE", "0.9")),
        top_k=int(os.getenv("ANALYSIS_TOP_K", "40")),
        top_p=float(os.getenv("ANALYSIS_TOP_P", "0.95")),
        max_output_tokens=int(os.getenv("ANALYSIS_MAX_TOKENS", "2048")),
    ))
    followup: GenerationSettings = field(default_factory=lambda: GenerationSettings(
        temperature=float(os.getenv("FOLLOWUP_TEMPERATURE", "0.8")),
        top_k=int(os.getenv("FOLLOWUP_TOP_K", "40")),
        top_p=float(os.getenv("FOLLOWUP_TOP_P", "0.95")),
        max_output_tokens=int(os.getenv("FOLLOWUP_MAX_TOKENS", "1024")),
    ))


@dataclass
class RetryConfig:
    """How hard we push the oracle before giving up"""
    max_attempts: int = int(os.getenv("MAX_ATTEMPTS", "3"))
    delay_seconds: float = float(os.getenv("RETRY_DELAY", "1.5"))
    oracle_timeout_seconds: float = float(os.getenv("ORACLE_TIMEOUT", "30.0"))


@dataclass
class QuizConfig:
    """Quiz shape and validation thresholds"""
    question_count: int = int(os.getenv("QUESTION_COUNT", "10"))
    options_per_question: int = 4
    interaction_cap: int = int(os.getenv("INTERACTION_CAP", "3"))
    custom_response_max_length: int = int(os.getenv("CUSTOM_RESPONSE_MAX", "500"))
    min_analysis_length: int = int(os.getenv("MIN_ANALYSIS_LENGTH", "100"))
    min_followup_length: int = int(os.getenv("MIN_FOLLOWUP_LENGTH", "50"))

    # Diversity guard: reject a batch when more than `diversity_max_repeated_words`
    # content words each occur more than `diversity_max_word_repeats` times.
    diversity_check: bool = os.getenv("DIVERSITY_CHECK", "true").lower() == "true"
    diversity_max_word_repeats: int = int(os.getenv("DIVERSITY_MAX_REPEATS", "3"))
    diversity_max_repeated_words: int = int(os.getenv("DIVERSITY_MAX_WORDS", "5"))

    structured_output: bool = os.getenv("STRUCTURED_OUTPUT", "true").lower() == "true"


@dataclass
class ModelConfig:
    """Oracle provider selection"""
    provider: Literal["gemini", "claude", "deepseek", "mock"] = os.getenv("QUIZ_PROVIDER", "gemini")
    model: str = os.getenv("QUIZ_MODEL", "")  # Empty = use provider default

    # Default models per provider
    PROVIDER_DEFAULTS = {
        "gemini": "gemini-2.0-flash",
        "claude": "claude-sonnet-4-20250514",
        "deepseek": "deepseek-chat",
        "mock": "mock-model-v1",
    }

    # Environment variable holding each provider's credential
    API_KEY_ENV = {
        "gemini": "GOOGLE_API_KEY",
        "claude": "ANTHROPIC_API_KEY",
        "deepseek": "DEEPSEEK_API_KEY",
    }

    def get_model(self) -> str:
        """Get model, falling back to provider default."""
        return self.model or self.PROVIDER_DEFAULTS.get(self.provider, "")


@dataclass
class ServerConfig:
    """HTTP surface"""
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "3000"))
    debug: bool = os.getenv("APP_ENV", "production").lower() == "development"
    followup_rate_limit: int = int(os.getenv("FOLLOWUP_RATE_LIMIT", "20"))
    followup_rate_window_seconds: float = float(os.getenv("FOLLOWUP_RATE_WINDOW", "3600"))
    # Only honour X-Forwarded-For when running behind a proxy that sets it
    trust_proxy_headers: bool = os.getenv("TRUST_PROXY_HEADERS", "false").lower() == "true"


@dataclass
class Config:
    """Master config, import this"""
    models: ModelConfig = field(default_factory=ModelConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    quiz: QuizConfig = field(default_factory=QuizConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # Quick presets
    @classmethod
    def fast_mode(cls) -> "Config":
        """For development/testing: no waiting between retries"""
        cfg = cls()
        cfg.retry.delay_seconds = 0.0
        cfg.retry.oracle_timeout_seconds = 5.0
        return cfg

    @classmethod
    def offline_mode(cls) -> "Config":
        """Run without any API key using the mock oracle"""
        cfg = cls.fast_mode()
        cfg.models.provider = "mock"
        cfg.models.model = ""
        return cfg


# Singleton
config = Config()
