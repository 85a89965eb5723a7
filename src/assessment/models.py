"""Pydantic v2 data models — the data contracts flowing through the engine."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from src.assessment.catalog import OptionValue, QuestionDefinition


# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

AnswerValue = StrictBool | StrictInt | StrictFloat | StrictStr

AnswerSet = dict[str, AnswerValue]

WarningCode = Literal["unknown_question", "malformed_answer"]

LiteracyTier = Literal["low", "developing", "strong"]

SkillLevel = Literal[
    "not-assessed",
    "beginner",
    "growing-learner",
    "competent",
    "skilled",
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Normalizer output
# ---------------------------------------------------------------------------

class AnswerWarning(_Frozen):
    question_id: str
    code: WarningCode
    message: str
    value: AnswerValue | None = None


class NormalizedResponse(_Frozen):
    question: QuestionDefinition
    raw_value: OptionValue
    value: float | None = None
    multiplier: float | None = None
    scored: bool = True
    correct: bool | None = None

    @property
    def question_id(self) -> str:
        return self.question.id


class CompletenessSummary(_Frozen):
    answered: int = 0
    active: int = 0
    scored: int = 0
    unsure: int = 0
    completion_rate: float | None = None


class NormalizationResult(_Frozen):
    responses: list[NormalizedResponse] = Field(default_factory=list)
    warnings: list[AnswerWarning] = Field(default_factory=list)
    completeness: CompletenessSummary = Field(default_factory=CompletenessSummary)


# ---------------------------------------------------------------------------
# Dimension profiles
# ---------------------------------------------------------------------------

class GiftScore(_Frozen):
    gift: str
    score: float
    raw_score: float
    contributing_questions: int
    rank: int


class GiftProfile(_Frozen):
    assessed: bool = False
    scores: list[GiftScore] = Field(default_factory=list)

    def top(self, n: int) -> list[GiftScore]:
        return self.scores[:n]


class BehavioralProfile(_Frozen):
    assessed: bool = False
    percentages: dict[str, int] = Field(default_factory=dict)
    raw_scores: dict[str, float] = Field(default_factory=dict)
    primary_trait: str | None = None
    secondary_trait: str | None = None


class LiteracyBucketScore(_Frozen):
    bucket: str
    percentage: float | None = None
    points: float = 0.0
    max_points: float = 0.0
    questions: int = 0


class LiteracyProfile(_Frozen):
    assessed: bool = False
    tier: LiteracyTier | None = None
    percentage: float | None = None
    points: float = 0.0
    max_points: float = 0.0
    correct_answers: int = 0
    buckets: list[LiteracyBucketScore] = Field(default_factory=list)

    def bucket(self, name: str) -> LiteracyBucketScore | None:
        return next((b for b in self.buckets if b.bucket == name), None)


class SkillResult(_Frozen):
    category: str
    level: SkillLevel = "not-assessed"
    can_serve: bool = False
    needs_training: bool = False
    score: float | None = None
    max_score: float = 0.0


class SkillProfile(_Frozen):
    categories: dict[str, SkillResult] = Field(default_factory=dict)

    @property
    def assessed(self) -> bool:
        return any(r.level != "not-assessed" for r in self.categories.values())

    def __getitem__(self, category: str) -> SkillResult:
        return self.categories[category]


# ---------------------------------------------------------------------------
# Ranker / gate output
# ---------------------------------------------------------------------------

class MinistryRecommendation(_Frozen):
    ministry_id: str
    name: str
    category: str
    score: float
    raw_score: float
    contributing_questions: int
    is_primary: bool = False
    requires_skill_verification: bool = False
    rank: int


class EligibilityResult(_Frozen):
    track: str
    eligible: bool | None = None
    score: float = 0.0
    max_score: float = 0.0
    contributing_questions: int = 0
    veto_reasons: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Composed result
# ---------------------------------------------------------------------------

class AssessmentResult(_Frozen):
    catalog_version: str
    warnings: list[AnswerWarning] = Field(default_factory=list)
    completeness: CompletenessSummary = Field(default_factory=CompletenessSummary)
    gift_profile: GiftProfile
    behavioral_profile: BehavioralProfile
    literacy_profile: LiteracyProfile
    skill_profile: SkillProfile
    ministry_recommendations: list[MinistryRecommendation] = Field(default_factory=list)
    eligibility: dict[str, EligibilityResult] = Field(default_factory=dict)

    @property
    def primary_ministries(self) -> list[MinistryRecommendation]:
        return [m for m in self.ministry_recommendations if m.is_primary]
