"""Response normalizer — answer set to active, numeric responses.

Two steps:
  1. Canonicalize each raw answer against its question's answer domain.
  2. Resolve activation as a fixed point over the conditional-trigger graph:
     a gated question is active only while its trigger is active and holds
     the trigger's activating answer.

Inactive questions are dropped silently.  Malformed answers to reachable
questions and answers to unknown ids become warnings, never exceptions.
"""

from __future__ import annotations

import logging
from typing import Mapping

from src.assessment.catalog import NO, YES, Catalog, OptionValue, QuestionDefinition, in_domain
from src.assessment.config import settings
from src.assessment.models import (
    AnswerValue,
    AnswerWarning,
    CompletenessSummary,
    NormalizationResult,
    NormalizedResponse,
)

logger = logging.getLogger(__name__)

UNSURE = 0


class _Malformed:
    pass


_MALFORMED = _Malformed()


def _canonicalize(question: QuestionDefinition, value: AnswerValue) -> OptionValue | _Malformed:
    canonical: object = value
    if question.type == "likert":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return _MALFORMED
        if isinstance(value, float):
            if not value.is_integer():
                return _MALFORMED
            canonical = int(value)
    elif question.type == "yes-no":
        if isinstance(value, bool):
            canonical = YES if value else NO
        elif isinstance(value, str):
            canonical = value.strip().lower()
        else:
            return _MALFORMED
    elif isinstance(value, bool):
        return _MALFORMED

    if not in_domain(question, canonical):
        return _MALFORMED
    return canonical  # type: ignore[return-value]


def _scalar(value: object) -> AnswerValue | None:
    return value if isinstance(value, (bool, int, float, str)) else None


def weight_multiplier(question: QuestionDefinition, value: OptionValue) -> float | None:
    """Directional multiplier shared by the weighted-sum scorers.

    Likert answers count relative to the neutral midpoint, so disagreement
    subtracts.  Yes/no maps to 1/0.  Multiple-choice answers are not
    weight-multiplied.
    """
    if question.type == "likert":
        if value == UNSURE and question.allows_unsure:
            return None
        return float(value) - settings.likert.neutral
    if question.type == "yes-no":
        return 1.0 if value == YES else 0.0
    return None


def _numeric_value(question: QuestionDefinition, value: OptionValue) -> float | None:
    if question.type == "likert":
        return float(value)
    if question.type == "yes-no":
        return 1.0 if value == YES else 0.0
    return None


def _gate_open(
    question: QuestionDefinition,
    catalog: Catalog,
    canonical: dict[str, OptionValue | _Malformed],
    active: set[str],
) -> bool:
    if question.conditional_trigger is None:
        return True
    trigger = catalog.get(question.conditional_trigger)
    if trigger is None or trigger.id not in active:
        return False
    return canonical[trigger.id] == trigger.activating_answer


def resolve_active(
    catalog: Catalog, canonical: dict[str, OptionValue | _Malformed],
) -> tuple[set[str], set[str]]:
    """Return (active ids, reachable-but-malformed ids)."""
    active: set[str] = set()
    rejected: set[str] = set()
    changed = True
    while changed:
        changed = False
        for q in catalog.questions:
            if q.id not in canonical or q.id in active or q.id in rejected:
                continue
            if not _gate_open(q, catalog, canonical, active):
                continue
            if isinstance(canonical[q.id], _Malformed):
                rejected.add(q.id)
            else:
                active.add(q.id)
            changed = True
    return active, rejected


def _response(question: QuestionDefinition, value: OptionValue) -> NormalizedResponse:
    multiplier = weight_multiplier(question, value)
    scored = not (question.type == "likert" and multiplier is None)
    correct = None
    if question.correct_answer is not None:
        correct = value == question.correct_answer
    return NormalizedResponse(
        question=question,
        raw_value=value,
        value=_numeric_value(question, value),
        multiplier=multiplier,
        scored=scored,
        correct=correct,
    )


def normalize(catalog: Catalog, answers: Mapping[str, AnswerValue]) -> NormalizationResult:
    canonical: dict[str, OptionValue | _Malformed] = {}
    for q in catalog.questions:
        if q.id in answers:
            canonical[q.id] = _canonicalize(q, answers[q.id])

    active, rejected = resolve_active(catalog, canonical)

    warnings: list[AnswerWarning] = []
    responses: list[NormalizedResponse] = []
    for q in catalog.questions:
        if q.id in rejected:
            warnings.append(AnswerWarning(
                question_id=q.id,
                code="malformed_answer",
                message=f"{answers[q.id]!r} is not a valid {q.type} answer",
                value=_scalar(answers[q.id]),
            ))
        elif q.id in active:
            responses.append(_response(q, canonical[q.id]))  # type: ignore[arg-type]

    for question_id in sorted(k for k in answers if catalog.get(k) is None):
        warnings.append(AnswerWarning(
            question_id=question_id,
            code="unknown_question",
            message="no such question in the catalog",
            value=_scalar(answers[question_id]),
        ))

    for w in warnings:
        logger.warning("Answer %s skipped (%s): %s", w.question_id, w.code, w.message)

    scored = sum(1 for r in responses if r.scored)
    completeness = CompletenessSummary(
        answered=len(canonical),
        active=len(responses),
        scored=scored,
        unsure=len(responses) - scored,
        completion_rate=round(scored / len(responses), 4) if responses else None,
    )
    logger.debug(
        "Normalized %d answers: %d active, %d warnings",
        len(answers), len(responses), len(warnings),
    )
    return NormalizationResult(
        responses=responses, warnings=warnings, completeness=completeness,
    )
