"""Scripture-literacy tier.

Knowledge questions earn their points when answered correctly; likert
self-assessments earn ``likert / max * points``.  A bucket with no active
question reports ``percentage=None`` ("not assessed") instead of 0.  The
overall percentage pools every point across buckets, unweighted.
"""

from __future__ import annotations

import logging

from src.assessment.catalog import Catalog
from src.assessment.config import settings
from src.assessment.models import (
    LiteracyBucketScore,
    LiteracyProfile,
    LiteracyTier,
    NormalizedResponse,
)

logger = logging.getLogger(__name__)


def tier_for(percentage: float) -> LiteracyTier:
    thresholds = settings.literacy
    if percentage >= thresholds.strong_min:
        return "strong"
    if percentage >= thresholds.developing_min:
        return "developing"
    return "low"


def _earned(r: NormalizedResponse) -> float | None:
    q = r.question
    points = q.literacy_points or 0.0
    if q.correct_answer is not None:
        return points if r.correct else 0.0
    if not r.scored or r.value is None:
        return None
    if q.type == "likert":
        return r.value / settings.likert.maximum * points
    return r.value * points


def _percent(earned: float, available: float) -> float | None:
    if available <= 0:
        return None
    return earned / available * 100


def score(catalog: Catalog, responses: list[NormalizedResponse]) -> LiteracyProfile:
    buckets = catalog.literacy_buckets()
    earned = {b: 0.0 for b in buckets}
    available = {b: 0.0 for b in buckets}
    counts = {b: 0 for b in buckets}
    correct = 0

    for r in responses:
        q = r.question
        if q.literacy_bucket is None:
            continue
        points = _earned(r)
        if points is None:
            continue
        earned[q.literacy_bucket] += points
        available[q.literacy_bucket] += q.literacy_points or 0.0
        counts[q.literacy_bucket] += 1
        if r.correct:
            correct += 1

    bucket_scores = []
    for b in buckets:
        pct = _percent(earned[b], available[b]) if counts[b] else None
        bucket_scores.append(LiteracyBucketScore(
            bucket=b,
            percentage=None if pct is None else round(pct, 1),
            points=round(earned[b], 2),
            max_points=available[b],
            questions=counts[b],
        ))

    total_earned = sum(earned.values())
    total_available = sum(available.values())
    overall = _percent(total_earned, total_available)
    if overall is None:
        logger.debug("Literacy profile: not assessed")
        return LiteracyProfile(assessed=False, buckets=bucket_scores)

    tier = tier_for(overall)
    logger.debug(
        "Literacy profile: %.1f/%.1f points (%.1f%%) -> %s",
        total_earned, total_available, overall, tier,
    )
    return LiteracyProfile(
        assessed=True,
        tier=tier,
        percentage=round(overall, 1),
        points=round(total_earned, 2),
        max_points=total_available,
        correct_answers=correct,
        buckets=bucket_scores,
    )
