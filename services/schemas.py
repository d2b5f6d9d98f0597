"""Pydantic schemas for the structured payloads we ask the model to return."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = [
    "Position",
    "StudyInsights",
    "StudyNode",
    "StudyEdge",
    "StudyGraph",
    "Chapter",
    "TopicDetail",
    "Resource",
    "TopicBreakdown",
    "TopicsByChapter",
    "QuizQuestion",
    "QuizPayload",
    "QuizRecommendation",
    "ConceptExplanation",
    "coerce_hours",
]

_DIFFICULTIES = {"easy", "medium", "hard"}


def coerce_hours(value: Any) -> float:
    """Coerce a model-supplied hour estimate to a finite, non-negative float."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip().split()[0] if value.strip() else "0"
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(hours) or math.isinf(hours) or hours < 0:
        return 0.0
    return hours


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        return [str(value)]
    return [str(item) for item in value if item is not None]


class Position(BaseModel):
    x: float = 0
    y: float = 0


class StudyInsights(BaseModel):
    bestPractices: List[str] = Field(default_factory=list)
    commonMistakes: List[str] = Field(default_factory=list)
    studyTechniques: List[str] = Field(default_factory=list)
    resourceRecommendations: List[str] = Field(default_factory=list)

    @field_validator("bestPractices", "commonMistakes", "studyTechniques",
                     "resourceRecommendations", mode="before")
    @classmethod
    def normalize_lists(cls, value):
        return _as_text_list(value)


class StudyNode(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    type: Literal["topic", "subtopic"] = "topic"
    label: str
    description: str = ""
    estimatedHours: float = Field(default=0.0, ge=0)
    position: Position = Field(default_factory=Position)
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None
    studyInsights: Optional[StudyInsights] = None

    @field_validator("id", "description", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return _as_text(value)

    @field_validator("label", mode="before")
    @classmethod
    def normalize_label(cls, value):
        text = _as_text(value).strip()
        if not text:
            raise ValueError("node label is required")
        return text

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return "subtopic" if str(value or "").strip().lower() == "subtopic" else "topic"

    @field_validator("estimatedHours", mode="before")
    @classmethod
    def normalize_hours(cls, value):
        return coerce_hours(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value):
        text = str(value or "").strip().lower()
        return text if text in _DIFFICULTIES else None


class StudyEdge(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    source: str
    target: str

    @field_validator("id", "source", "target", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return _as_text(value)


class StudyGraph(BaseModel):
    nodes: List[StudyNode] = Field(min_length=1)
    edges: List[StudyEdge] = Field(default_factory=list)
    overallStudyStrategy: Optional[Dict[str, Any]] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Chapter(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any = None
    title: str
    description: str = ""
    difficulty: str = "Medium"
    estimatedStudyHours: float = 0.0
    topics: List[str] = Field(default_factory=list)

    @field_validator("title", "description", "difficulty", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return _as_text(value)

    @field_validator("estimatedStudyHours", mode="before")
    @classmethod
    def normalize_hours(cls, value):
        return coerce_hours(value)

    @field_validator("topics", mode="before")
    @classmethod
    def normalize_topics(cls, value):
        return _as_text_list(value)


class TopicDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any = None
    title: str
    description: str = ""
    keyPoints: List[str] = Field(default_factory=list)
    difficulty: str = "Medium"
    estimatedStudyHours: float = 0.0
    priority: str = "Medium"
    prerequisites: List[str] = Field(default_factory=list)

    @field_validator("title", "description", "difficulty", "priority", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return _as_text(value)

    @field_validator("estimatedStudyHours", mode="before")
    @classmethod
    def normalize_hours(cls, value):
        return coerce_hours(value)

    @field_validator("keyPoints", "prerequisites", mode="before")
    @classmethod
    def normalize_lists(cls, value):
        return _as_text_list(value)


class Resource(BaseModel):
    title: str
    type: str = ""
    description: str = ""


class TopicBreakdown(BaseModel):
    topics: List[TopicDetail]
    flowData: Dict[str, Any] = Field(default_factory=lambda: {"nodes": [], "edges": []})
    recommendedResources: List[Resource] = Field(default_factory=list)


class TopicsByChapter(BaseModel):
    topicsByChapter: Dict[str, List[str]]

    @field_validator("topicsByChapter", mode="before")
    @classmethod
    def normalize_lists(cls, value):
        if not isinstance(value, dict):
            raise ValueError("topicsByChapter must be an object")
        return {str(k): _as_text_list(v) for k, v in value.items()}


class QuizQuestion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    question: str
    options: List[str]
    correctAnswer: str
    explanation: str = ""
    difficulty: str = "medium"
    conceptTested: str = ""
    recommendedStudyTopic: str = ""

    @field_validator("id", "correctAnswer", "explanation", "conceptTested",
                     "recommendedStudyTopic", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return _as_text(value)

    @field_validator("options", mode="before")
    @classmethod
    def normalize_options(cls, value):
        # Some responses use the {"A": ..., "B": ...} shape
        if isinstance(value, dict):
            value = list(value.values())
        options = _as_text_list(value)
        if len(options) < 2:
            raise ValueError("a question needs at least two options")
        return options

    @model_validator(mode="after")
    def resolve_answer_letter(self):
        # "B" style answers are turned into the option text they point at
        answer = self.correctAnswer.strip()
        if answer not in self.options and len(answer) == 1 and answer.upper().isalpha():
            index = ord(answer.upper()) - ord("A")
            if 0 <= index < len(self.options):
                self.correctAnswer = self.options[index]
        return self


class QuizPayload(BaseModel):
    questions: List[QuizQuestion] = Field(min_length=1)


class QuizRecommendation(BaseModel):
    model_config = ConfigDict(extra="allow")

    overallAssessment: str = ""
    weakAreas: List[str] = Field(default_factory=list)
    studyPlan: str = ""
    studyTechniques: List[str] = Field(default_factory=list)
    practiceExercises: List[str] = Field(default_factory=list)

    @field_validator("weakAreas", "studyTechniques", "practiceExercises", mode="before")
    @classmethod
    def normalize_lists(cls, value):
        return _as_text_list(value)

    @field_validator("overallAssessment", "studyPlan", mode="before")
    @classmethod
    def normalize_texts(cls, value):
        # studyPlan sometimes comes back as a list of steps
        if isinstance(value, list):
            return "\n".join(_as_text_list(value))
        return _as_text(value)


class ConceptExplanation(BaseModel):
    conceptual: str
    visual: str
    analogical: str
    stepByStep: str

    @field_validator("conceptual", "visual", "analogical", "stepByStep", mode="before")
    @classmethod
    def normalize_texts(cls, value):
        if isinstance(value, list):
            return "\n".join(_as_text_list(value))
        return _as_text(value)
