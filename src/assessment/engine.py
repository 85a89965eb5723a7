"""Top-level entry point — scores one answer set against a question catalog.

Pipeline:
  1. Normalize answers: canonical values, gating, warnings
  2. Score the four dimensions (gifts, behavioral style, literacy, skills)
  3. Rank ministry affinity
  4. Evaluate sensitive-ministry eligibility
  5. Compose the immutable result record

Pure and synchronous: the same catalog and answers always give the same
result, and the catalog is never mutated, so one instance can be shared.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from pydantic import TypeAdapter

from src.assessment import eligibility
from src.assessment.catalog import Catalog, load_default_catalog
from src.assessment.composer import compose
from src.assessment.config import DATA_DIR
from src.assessment.models import AnswerSet, AnswerValue, AssessmentResult
from src.assessment.normalizer import normalize
from src.assessment.scoring import behavioral, gifts, literacy, ministry, skills

logger = logging.getLogger(__name__)

_answer_set = TypeAdapter(AnswerSet)


def load_answers_from_json(data: Mapping[str, Any]) -> AnswerSet:
    """Validate the type shape of an answer set (string/number/boolean values)."""
    return _answer_set.validate_python(data)


def load_sample_answers() -> dict[str, AnswerSet]:
    path = DATA_DIR / "sample_answers.json"
    with open(path) as f:
        raw = json.load(f)
    return {name: load_answers_from_json(answers) for name, answers in raw.items()}


def score(catalog: Catalog | Mapping[str, Any], answers: Mapping[str, AnswerValue]) -> AssessmentResult:
    if not isinstance(catalog, Catalog):
        catalog = Catalog.model_validate(catalog)

    normalized = normalize(catalog, answers)
    responses = normalized.responses
    skill_profile = skills.score(catalog, responses)

    result = compose(
        catalog_version=catalog.version,
        normalized=normalized,
        gift_profile=gifts.score(catalog, responses),
        behavioral_profile=behavioral.score(catalog, responses),
        literacy_profile=literacy.score(catalog, responses),
        skill_profile=skill_profile,
        ministry_recommendations=ministry.rank(catalog, responses, skill_profile),
        eligibility=eligibility.evaluate(catalog, responses),
    )

    logger.info(
        "Scored %d answers (%d active, %d warnings) -> %d ministry recommendations",
        len(answers),
        normalized.completeness.active,
        len(result.warnings),
        len(result.ministry_recommendations),
    )
    return result


def run(answers: Mapping[str, AnswerValue], catalog: Catalog | None = None) -> AssessmentResult:
    """Score against the process-wide default catalog unless one is given."""
    return score(catalog or load_default_catalog(), answers)
