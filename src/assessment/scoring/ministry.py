"""Ministry affinity ranking.

Every active question can carry ministry weights, whatever section it sits
in.  Raw affinity is ``multiplier * weight`` summed per ministry, reusing the
directional multiplier of the gift scorer (likert above/below neutral, yes/no
as 1/0).  Scores are divided by the top raw score so the leader reads 1.0.

Ministries with a catalog restriction (e.g. nursery is open to ``sex=female``)
are dropped before ranking when the respondent answered the restricting
question with any other value.  An unanswered restricting question keeps the
ministry in.

Selection:
  - top ``primary_count`` ministries are primary, provided their normalized
    score is positive (a zero-affinity ministry is never promoted)
  - further ministries need a score above ``secondary_threshold``
  - the whole list is capped at ``max_recommendations``

Ministries flagged ``requires_skill_verification`` keep the flag unless their
linked skill category reports ``can_serve``.
"""

from __future__ import annotations

import logging

from src.assessment.catalog import Catalog, MinistryInfo
from src.assessment.config import settings
from src.assessment.models import MinistryRecommendation, NormalizedResponse, SkillProfile

logger = logging.getLogger(__name__)


def affinities(responses: list[NormalizedResponse]) -> tuple[dict[str, float], dict[str, int]]:
    """Raw affinity and count of non-zero contributions per ministry."""
    raw: dict[str, float] = {}
    counts: dict[str, int] = {}
    for r in responses:
        if r.multiplier is None or not r.question.ministry_weights:
            continue
        for ministry_id, weight in r.question.ministry_weights.items():
            contribution = r.multiplier * weight
            raw[ministry_id] = raw.get(ministry_id, 0.0) + contribution
            if contribution != 0:
                counts[ministry_id] = counts.get(ministry_id, 0) + 1
    return raw, counts


def is_open(info: MinistryInfo, answers: dict[str, NormalizedResponse]) -> bool:
    restriction = info.restricted_to
    if restriction is None:
        return True
    response = answers.get(restriction.question)
    return response is None or response.raw_value in restriction.values


def _needs_verification(info: MinistryInfo, skill_profile: SkillProfile | None) -> bool:
    if not info.requires_skill_verification:
        return False
    if skill_profile is None or info.skill_category is None:
        return True
    result = skill_profile.categories.get(info.skill_category)
    return result is None or not result.can_serve


def rank(
    catalog: Catalog,
    responses: list[NormalizedResponse],
    skill_profile: SkillProfile | None = None,
) -> list[MinistryRecommendation]:
    raw, counts = affinities(responses)
    by_id = {r.question_id: r for r in responses}

    candidates = []
    for ministry_id in catalog.ministry_ids():
        if counts.get(ministry_id, 0) == 0:
            continue
        if not is_open(catalog.ministry_info(ministry_id), by_id):
            logger.debug("Ministry %s excluded by restriction", ministry_id)
            continue
        candidates.append(ministry_id)
    if not candidates:
        logger.debug("Ministry ranking: no contributing answers")
        return []

    order = {m: idx for idx, m in enumerate(catalog.ministry_ids())}
    ordered = sorted(candidates, key=lambda m: (-raw[m], -counts[m], order[m]))
    top = raw[ordered[0]]
    if top <= 0:
        logger.debug("Ministry ranking: no positive affinity")
        return []

    cfg = settings.ministry
    recommendations: list[MinistryRecommendation] = []
    for ministry_id in ordered:
        if len(recommendations) >= cfg.max_recommendations:
            break
        normalized = raw[ministry_id] / top
        is_primary = len(recommendations) < cfg.primary_count and normalized > 0
        if not is_primary and normalized <= cfg.secondary_threshold:
            break
        info = catalog.ministry_info(ministry_id)
        recommendations.append(MinistryRecommendation(
            ministry_id=ministry_id,
            name=info.name,
            category=info.category,
            score=round(normalized, 4),
            raw_score=round(raw[ministry_id], 4),
            contributing_questions=counts[ministry_id],
            is_primary=is_primary,
            requires_skill_verification=_needs_verification(info, skill_profile),
            rank=len(recommendations) + 1,
        ))

    logger.debug(
        "Ministry ranking: %d candidates, %d recommended (%s)",
        len(candidates), len(recommendations),
        ", ".join(m.ministry_id for m in recommendations),
    )
    return recommendations
