"""Spiritual-gift ranking.

Raw score per gift is the sum of ``(likert - neutral) * weight`` over active
likert questions weighting that gift, so disagreement pulls a gift down.
Raw scores are min-max scaled onto 0..100 with the strongest gift as the
100 anchor.  Gifts without a contributing question are omitted.

Ties: more contributing questions first, then catalog order.
"""

from __future__ import annotations

import logging

from src.assessment.catalog import Catalog
from src.assessment.config import settings
from src.assessment.models import GiftProfile, GiftScore, NormalizedResponse

logger = logging.getLogger(__name__)


def _scale(raw: float, lo: float, hi: float) -> float:
    if hi == lo:
        return settings.gift_scale if hi > 0 else 0.0
    return (raw - lo) / (hi - lo) * settings.gift_scale


def score(catalog: Catalog, responses: list[NormalizedResponse]) -> GiftProfile:
    raw: dict[str, float] = {}
    counts: dict[str, int] = {}

    for r in responses:
        q = r.question
        if q.type != "likert" or not q.gift_weights or r.multiplier is None:
            continue
        for gift, weight in q.gift_weights.items():
            raw[gift] = raw.get(gift, 0.0) + r.multiplier * weight
            counts[gift] = counts.get(gift, 0) + 1

    if not raw:
        logger.debug("Gift profile: no contributing questions")
        return GiftProfile(assessed=False)

    order = {gift: idx for idx, gift in enumerate(catalog.gifts())}
    ranked = sorted(raw, key=lambda g: (-raw[g], -counts[g], order[g]))
    hi, lo = raw[ranked[0]], raw[ranked[-1]]

    scores = [
        GiftScore(
            gift=gift,
            score=round(_scale(raw[gift], lo, hi), 1),
            raw_score=round(raw[gift], 4),
            contributing_questions=counts[gift],
            rank=rank,
        )
        for rank, gift in enumerate(ranked, 1)
    ]
    logger.debug(
        "Gift profile: %d gifts scored, top=%s (raw=%.2f)",
        len(scores), scores[0].gift, hi,
    )
    return GiftProfile(assessed=True, scores=scores)
