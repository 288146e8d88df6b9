"""
Mock provider for testing

Returns configurable responses without making API calls and records every
call so tests can assert on how often the oracle was consulted.
"""

import asyncio
import json
import random
from dataclasses import dataclass, field
from typing import Optional, List, Callable

from .base import ModelProvider, ModelResponse, ProviderError


MOCK_TOPICS = [
    ("spend a free Saturday", ["Reading quietly at home", "Hiking a new trail", "Hosting friends for dinner", "Learning a new skill"]),
    ("handle an unexpected problem at work", ["Make a plan before acting", "Ask a colleague for input", "Act on instinct", "Wait to see how it unfolds"]),
    ("choose a travel destination", ["Somewhere historic", "A remote beach", "A busy city", "Wherever friends are going"]),
    ("react to criticism", ["Reflect on it privately", "Discuss it openly", "Defend my position", "Use it as motivation"]),
    ("recharge after a long week", ["Sleep in", "Go dancing", "Cook something elaborate", "Play video games"]),
    ("approach a group project", ["Take the lead", "Support whoever leads", "Handle research", "Keep everyone motivated"]),
    ("pick a book", ["Mystery novel", "Biography", "Science fiction", "Poetry collection"]),
    ("make a big purchase", ["Compare every review", "Trust a recommendation", "Buy what feels right", "Delay until certain"]),
    ("settle a disagreement between friends", ["Mediate calmly", "Give them space", "Pick a side honestly", "Lighten the mood"]),
    ("imagine your ideal home", ["Cabin in the woods", "Downtown loft", "Seaside cottage", "Farmhouse with animals"]),
    ("start your morning", ["Exercise first", "Coffee and news", "Meditation", "Straight into work"]),
    ("celebrate an achievement", ["Quiet treat for myself", "Big party", "Share it online", "Set the next goal"]),
]


def generate_mock_questions(count: int = 10, options: int = 4, *, as_json: bool = False) -> str:
    """
    Generate oracle-style question text.

    Args:
        count: Number of questions to produce
        options: Number of lettered options per question
        as_json: Emit the structured JSON shape instead of numbered text

    Returns:
        Text in the format the question parser expects
    """
    picked = [MOCK_TOPICS[i % len(MOCK_TOPICS)] for i in range(count)]

    if as_json:
        return json.dumps({
            "questions": [
                {"question": f"How would you {topic}?", "options": list(choices[:options])}
                for topic, choices in picked
            ]
        }, indent=2)

    blocks = []
    for number, (topic, choices) in enumerate(picked, start=1):
        lines = [f"{number}. How would you {topic}?"]
        for letter, choice in zip("abcd", choices[:options]):
            lines.append(f"{letter}) {choice}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


def generate_mock_analysis(sections: Optional[List[str]] = None) -> str:
    """Generate a markdown-flavoured analysis with the given section headers."""
    sections = sections or ["Core Traits", "Decision-Making Style", "Key Strengths", "Growth Areas"]
    parts = []
    for heading in sections:
        parts.append(
            f"**{heading}:**\n"
            f"Your answers point to a thoughtful, *curious* person when it comes to {heading.lower()}. "
            "You weigh options carefully and tend to follow through once you commit."
        )
    return "\n\n\n".join(parts)


def generate_mock_followup() -> str:
    """Generate a follow-up answer with the three requested sections."""
    return (
        "**Direct Answer:** Yes, that fits the picture your earlier answers painted.\n\n"
        "**Explanation:** You consistently preferred planning over improvising, "
        "which suggests you would enjoy roles with clear long-term goals.\n\n"
        "**Additional Insights:** Try pairing that structure with one spontaneous habit each week."
    )


@dataclass
class MockProvider(ModelProvider):
    """
    Mock provider for testing.

    Can be configured with custom response generators, fixed responses, or a
    scripted sequence of responses (the last one repeats once exhausted).
    """

    _name: str = "mock"
    _default_model: str = "mock-model-v1"
    fixed_response: Optional[str] = None
    responses: List[str] = field(default_factory=list)
    response_generator: Optional[Callable[[str], str]] = None
    error: Optional[Exception] = None  # Raised on every call when set
    delay_seconds: float = 0.0
    fail_rate: float = 0.0  # Probability of raising an error
    json_capable: bool = False
    token_count: int = 100
    calls: List[dict] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self._name

    @property
    def default_model(self) -> str:
        return self._default_model

    @property
    def supports_json_output(self) -> bool:
        return self.json_capable

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def generate(
        self,
        prompt: str,
        *,
        system: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 2048,
        temperature: float = 0.7,
        top_k: Optional[int] = None,
        top_p: Optional[float] = None,
        json_output: bool = False,
        **kwargs
    ) -> ModelResponse:
        """Generate a mock response."""
        self.calls.append({
            "prompt": prompt,
            "system": system,
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "top_k": top_k,
            "top_p": top_p,
            "json_output": json_output,
        })

        # Simulate delay
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if self.error is not None:
            raise self.error

        # Simulate failures
        if self.fail_rate > 0 and random.random() < self.fail_rate:
            raise ProviderError("Simulated mock provider failure")

        if self.fixed_response is not None:
            content = self.fixed_response
        elif self.responses:
            index = min(len(self.calls), len(self.responses)) - 1
            content = self.responses[index]
        elif self.response_generator is not None:
            content = self.response_generator(prompt)
        else:
            content = self._default_response(prompt, json_output)

        return ModelResponse(
            content=content,
            model=model or self._default_model,
            provider=self.name,
            usage={
                "input_tokens": len(prompt.split()) * 2,
                "output_tokens": self.token_count,
            },
        )

    def _default_response(self, prompt: str, json_output: bool = False) -> str:
        """
        Generate a contextual mock response based on prompt content.

        Tries to detect what kind of response is expected and returns appropriate mock data.
        """
        prompt_lower = prompt.lower()

        if "previous analysis:" in prompt_lower:
            return generate_mock_followup()

        if "multiple choice questions" in prompt_lower:
            return generate_mock_questions(as_json=json_output)

        if "answers" in prompt_lower:
            return generate_mock_analysis()

        return json.dumps({
            "message": "Mock response generated",
            "prompt_length": len(prompt),
        }, indent=2)
