"""Configuration — scale constants, tier thresholds, ranking limits."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"


class LikertScale(BaseModel):
    neutral: int = 3
    maximum: int = 5


class BehavioralThresholds(BaseModel):
    # Percentage points between primary and secondary trait.
    secondary_threshold: float = Field(default=15.0, ge=0.0, le=100.0)


class LiteracyThresholds(BaseModel):
    developing_min: float = Field(default=50.0, ge=0.0, le=100.0)
    strong_min: float = Field(default=80.0, ge=0.0, le=100.0)

    @model_validator(mode="after")
    def _ordered(self) -> LiteracyThresholds:
        if self.developing_min > self.strong_min:
            raise ValueError("developing_min must not exceed strong_min")
        return self


class SkillThresholds(BaseModel):
    """Minimum raw points for each level above beginner."""

    growing_learner: float
    competent: float
    skilled: float

    @model_validator(mode="after")
    def _ordered(self) -> SkillThresholds:
        if not self.growing_learner <= self.competent <= self.skilled:
            raise ValueError("skill thresholds must be non-decreasing")
        return self


class SkillSettings(BaseModel):
    thresholds: dict[str, SkillThresholds] = Field(default_factory=lambda: {
        "sound": SkillThresholds(growing_learner=2.6, competent=3.9, skilled=5.2),
        "media": SkillThresholds(growing_learner=0.4, competent=0.6, skilled=0.8),
        "propresenter": SkillThresholds(growing_learner=0.6, competent=0.9, skilled=1.2),
        "photography": SkillThresholds(growing_learner=0.6, competent=0.9, skilled=1.2),
    })
    # Fractions of a category's available points, for categories not listed above.
    default_fractions: SkillThresholds = SkillThresholds(
        growing_learner=0.4, competent=0.6, skilled=0.8,
    )


class MinistrySettings(BaseModel):
    primary_count: int = Field(default=3, ge=0)
    secondary_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    max_recommendations: int = Field(default=6, ge=0)


class Settings(BaseSettings):
    catalog_path: Path = DATA_DIR / "catalog.json"
    log_level: str = "INFO"

    likert: LikertScale = LikertScale()
    gift_scale: float = 100.0
    behavioral: BehavioralThresholds = BehavioralThresholds()
    literacy: LiteracyThresholds = LiteracyThresholds()
    skills: SkillSettings = SkillSettings()
    ministry: MinistrySettings = MinistrySettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ASSESSMENT_",
        env_nested_delimiter="__",
        extra="ignore",
    )


settings = Settings()
