"""Eligibility gate for sensitive ministries (children, youth, support groups).

Each qualification track accumulates ``value * qualification_weight`` over its
active questions.  Separately, any active question answered with its
disqualifying answer vetoes the track: eligibility is then False no matter
how high the score is.  A track with no active questions is not assessed
(``eligible=None``), distinct from an explicit pass.
"""

from __future__ import annotations

import logging

from src.assessment.catalog import Catalog
from src.assessment.models import EligibilityResult, NormalizedResponse

logger = logging.getLogger(__name__)


def _evaluate_track(track: str, responses: list[NormalizedResponse]) -> EligibilityResult:
    score = 0.0
    max_score = 0.0
    contributing = 0
    vetoes: list[str] = []

    for r in responses:
        q = r.question
        if q.qualification_category != track:
            continue
        if q.disqualifying_answer is not None and r.raw_value == q.disqualifying_answer:
            vetoes.append(q.id)
        if r.scored and r.value is not None:
            weight = q.qualification_weight or 0.0
            score += r.value * weight
            max_score += q.ceiling * weight
            contributing += 1

    if vetoes:
        eligible: bool | None = False
    elif contributing == 0:
        eligible = None
    else:
        eligible = True

    return EligibilityResult(
        track=track,
        eligible=eligible,
        score=round(score, 4),
        max_score=round(max_score, 4),
        contributing_questions=contributing,
        veto_reasons=vetoes,
    )


def evaluate(catalog: Catalog, responses: list[NormalizedResponse]) -> dict[str, EligibilityResult]:
    results = {
        track: _evaluate_track(track, responses)
        for track in catalog.qualification_tracks()
    }
    for track, result in results.items():
        if result.veto_reasons:
            logger.debug("Track %s vetoed by %s", track, ", ".join(result.veto_reasons))
        else:
            logger.debug(
                "Track %s: eligible=%s score=%.1f/%.1f",
                track, result.eligible, result.score, result.max_score,
            )
    return results
