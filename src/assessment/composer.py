"""Result composer — packs upstream outputs into one immutable record."""

from __future__ import annotations

from src.assessment.models import (
    AssessmentResult,
    BehavioralProfile,
    EligibilityResult,
    GiftProfile,
    LiteracyProfile,
    MinistryRecommendation,
    NormalizationResult,
    SkillProfile,
)


def compose(
    catalog_version: str,
    normalized: NormalizationResult,
    gift_profile: GiftProfile,
    behavioral_profile: BehavioralProfile,
    literacy_profile: LiteracyProfile,
    skill_profile: SkillProfile,
    ministry_recommendations: list[MinistryRecommendation],
    eligibility: dict[str, EligibilityResult],
) -> AssessmentResult:
    return AssessmentResult(
        catalog_version=catalog_version,
        warnings=normalized.warnings,
        completeness=normalized.completeness,
        gift_profile=gift_profile,
        behavioral_profile=behavioral_profile,
        literacy_profile=literacy_profile,
        skill_profile=skill_profile,
        ministry_recommendations=ministry_recommendations,
        eligibility=eligibility,
    )
