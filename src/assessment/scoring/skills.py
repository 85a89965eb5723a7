"""Technical-skill levels per category.

A category may have a gating question: a question of that category that
other questions of the same category hang off.  When the gate is closed the
category is reported as not assessed.  Otherwise earned skill points are
mapped onto beginner < growing-learner < competent < skilled.

Points earned:
  - knowledge question: full points when correct
  - likert: points scaled by agreement above neutral (neutral or below earns 0)
  - yes/no: full points on "yes"
"""

from __future__ import annotations

import logging

from src.assessment.catalog import Catalog, QuestionDefinition
from src.assessment.config import SkillThresholds, settings
from src.assessment.models import NormalizedResponse, SkillLevel, SkillProfile, SkillResult

logger = logging.getLogger(__name__)


def _gate(catalog: Catalog, category: str) -> QuestionDefinition | None:
    for q in catalog.questions:
        if q.skill_category != category:
            continue
        if any(d.skill_category == category for d in catalog.dependents(q.id)):
            return q
    return None


def _earned(r: NormalizedResponse) -> float:
    q = r.question
    points = q.skill_points or 0.0
    if q.correct_answer is not None:
        return points if r.correct else 0.0
    if q.type == "likert":
        likert = settings.likert
        above = max(0.0, r.value - likert.neutral)
        return points * above / (likert.maximum - likert.neutral)
    if q.type == "yes-no":
        return points * r.value
    return 0.0


def _thresholds(category: str, max_points: float) -> SkillThresholds:
    configured = settings.skills.thresholds.get(category)
    if configured is not None:
        return configured
    f = settings.skills.default_fractions
    return SkillThresholds(
        growing_learner=f.growing_learner * max_points,
        competent=f.competent * max_points,
        skilled=f.skilled * max_points,
    )


def level_for(points: float, thresholds: SkillThresholds) -> SkillLevel:
    if points >= thresholds.skilled:
        return "skilled"
    if points >= thresholds.competent:
        return "competent"
    if points >= thresholds.growing_learner:
        return "growing-learner"
    return "beginner"


def _score_category(
    catalog: Catalog, category: str, by_id: dict[str, NormalizedResponse],
) -> SkillResult:
    max_points = sum(
        q.skill_points or 0.0 for q in catalog.questions if q.skill_category == category
    )

    gate = _gate(catalog, category)
    if gate is not None:
        gate_response = by_id.get(gate.id)
        if gate_response is None or gate_response.raw_value != gate.activating_answer:
            return SkillResult(category=category, max_score=max_points)

    assessable = [
        r for r in by_id.values()
        if r.question.skill_category == category
        and (r.question.skill_points or 0.0) > 0
        and r.scored
    ]
    if not assessable:
        return SkillResult(category=category, max_score=max_points)

    points = sum(_earned(r) for r in assessable)
    level = level_for(points, _thresholds(category, max_points))
    return SkillResult(
        category=category,
        level=level,
        can_serve=level in ("competent", "skilled"),
        needs_training=level in ("beginner", "growing-learner"),
        score=round(points, 2),
        max_score=max_points,
    )


def score(catalog: Catalog, responses: list[NormalizedResponse]) -> SkillProfile:
    by_id = {r.question_id: r for r in responses}
    categories = {
        category: _score_category(catalog, category, by_id)
        for category in catalog.skill_categories()
    }
    logger.debug(
        "Skill profile: %s",
        {c: r.level for c, r in categories.items()},
    )
    return SkillProfile(categories=categories)
