"""
Request and response models for the HTTP API

Field names on the wire are camelCase to match the browser client.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class QuestionModel(WireModel):
    question: str
    options: list[str]


class ThemeModel(WireModel):
    title: str
    description: str
    system_prompt: str = Field(alias="systemPrompt")


class AnalyzeRequest(WireModel):
    answers: list[str] = Field(default_factory=list)
    prompt_type: Optional[str] = Field(default=None, alias="promptType")
    custom_prompt: Optional[str] = Field(default=None, alias="customPrompt")
    interaction_count: int = Field(default=0, alias="interactionCount")
    questions: Optional[list[QuestionModel]] = None


class FollowUpRequest(WireModel):
    question: Optional[str] = None
    previous_analysis: Optional[str] = Field(default=None, alias="previousAnalysis")
    interaction_count: int = Field(default=0, alias="interactionCount")


class SectionModel(WireModel):
    heading: str
    body: str


class AnalyzeResponse(WireModel):
    analysis: str
    sections: list[SectionModel]
    remaining_interactions: int = Field(alias="remainingInteractions")
    success: bool = True


class FollowUpResponse(WireModel):
    answer: str
    sections: list[SectionModel]
    remaining_interactions: int = Field(alias="remainingInteractions")
    success: bool = True


class HealthResponse(WireModel):
    status: str
    provider: str
    model: str
