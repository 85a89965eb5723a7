"""Behavioral-style (DISC) profile.

Raw trait score is ``likert * weight`` summed over active questions, with no
midpoint subtraction: absolute agreement strength matters here.  Trait
percentages are whole numbers summing to exactly 100; the rounding residual
goes to the strongest trait.
"""

from __future__ import annotations

import logging

from src.assessment.catalog import Catalog
from src.assessment.config import settings
from src.assessment.models import BehavioralProfile, NormalizedResponse

logger = logging.getLogger(__name__)


def _percentages(raw: dict[str, float], traits: list[str]) -> dict[str, int]:
    total = sum(raw.values())
    rounded = {t: int(round(raw[t] / total * 100)) for t in traits}
    leader = max(traits, key=lambda t: (raw[t], -traits.index(t)))
    rounded[leader] += 100 - sum(rounded.values())
    return rounded


def score(catalog: Catalog, responses: list[NormalizedResponse]) -> BehavioralProfile:
    traits = catalog.traits()
    raw = {t: 0.0 for t in traits}

    for r in responses:
        q = r.question
        if q.type != "likert" or not q.trait_weights or not r.scored:
            continue
        for trait, weight in q.trait_weights.items():
            raw[trait] += r.value * weight

    if sum(raw.values()) <= 0:
        logger.debug("Behavioral profile: not assessed")
        return BehavioralProfile(assessed=False)

    pct = _percentages(raw, traits)
    ranking = sorted(traits, key=lambda t: (-pct[t], -raw[t], traits.index(t)))
    primary = ranking[0]

    secondary = None
    if len(ranking) > 1:
        runner_up = ranking[1]
        gap = pct[primary] - pct[runner_up]
        if pct[runner_up] > 0 and gap <= settings.behavioral.secondary_threshold:
            secondary = runner_up

    logger.debug(
        "Behavioral profile: %s primary=%s secondary=%s",
        pct, primary, secondary,
    )
    return BehavioralProfile(
        assessed=True,
        percentages=pct,
        raw_scores={t: round(v, 4) for t, v in raw.items()},
        primary_trait=primary,
        secondary_trait=secondary,
    )
