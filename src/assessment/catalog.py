"""Question catalog — the versioned weight tables the scorers read.

The catalog is data, not logic: every gift, trait, ministry and qualification
weight comes from ``data/catalog.json``.  It is validated once when loaded and
shared read-only by every scoring run in the process.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from src.assessment.config import settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

QuestionType = Literal["likert", "multiple-choice", "yes-no"]

OptionValue = str | int

YES = "yes"
NO = "no"


class CatalogIntegrityError(Exception):
    """The catalog is structurally invalid; scoring cannot proceed."""


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class AnswerOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: OptionValue
    label: str = ""


class QuestionDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    section: int
    type: QuestionType
    text: str = ""
    options: list[AnswerOption] = Field(default_factory=list)

    gift_weights: dict[str, float] = Field(default_factory=dict)
    trait_weights: dict[str, float] = Field(default_factory=dict)
    ministry_weights: dict[str, float] = Field(default_factory=dict)

    correct_answer: OptionValue | None = None
    literacy_bucket: str | None = None
    literacy_points: float | None = Field(default=None, ge=0.0)
    skill_category: str | None = None
    skill_points: float | None = Field(default=None, ge=0.0)

    qualification_category: str | None = None
    qualification_weight: float | None = None
    disqualifying_answer: OptionValue | None = None

    conditional_trigger: str | None = None
    activating_answer: OptionValue | None = None

    @property
    def option_values(self) -> tuple[OptionValue, ...]:
        if self.options:
            return tuple(o.value for o in self.options)
        if self.type == "likert":
            return tuple(range(1, settings.likert.maximum + 1))
        if self.type == "yes-no":
            return (YES, NO)
        return ()

    @property
    def allows_unsure(self) -> bool:
        """Likert questions offering 0 as an "I don't know" answer."""
        return self.type == "likert" and in_domain(self, 0)

    @property
    def ceiling(self) -> float:
        """Highest numeric value an answer to this question can take."""
        if self.type == "likert":
            return float(max(v for v in self.option_values if isinstance(v, int)))
        if self.type == "yes-no":
            return 1.0
        return 0.0


class MinistryRestriction(BaseModel):
    """Ministry open only to respondents who answered ``question`` with one of ``values``."""

    model_config = ConfigDict(frozen=True)

    question: str
    values: list[OptionValue]


class MinistryInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    category: str = "General"
    restricted_to: MinistryRestriction | None = None
    # Join requests need a skill check unless the linked skill category can serve.
    requires_skill_verification: bool = False
    skill_category: str | None = None


class Catalog(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    questions: list[QuestionDefinition]
    ministries: dict[str, MinistryInfo] = Field(default_factory=dict)

    _index: dict[str, int] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        check_integrity(self)
        self._index = {q.id: i for i, q in enumerate(self.questions)}

    def get(self, question_id: str) -> QuestionDefinition | None:
        idx = self._index.get(question_id)
        return None if idx is None else self.questions[idx]

    def dependents(self, question_id: str) -> list[QuestionDefinition]:
        return [q for q in self.questions if q.conditional_trigger == question_id]

    def gifts(self) -> list[str]:
        return _ordered(k for q in self.questions for k in q.gift_weights)

    def traits(self) -> list[str]:
        return _ordered(k for q in self.questions for k in q.trait_weights)

    def literacy_buckets(self) -> list[str]:
        return _ordered(q.literacy_bucket for q in self.questions if q.literacy_bucket)

    def skill_categories(self) -> list[str]:
        return _ordered(q.skill_category for q in self.questions if q.skill_category)

    def qualification_tracks(self) -> list[str]:
        return _ordered(
            q.qualification_category for q in self.questions if q.qualification_category
        )

    def ministry_ids(self) -> list[str]:
        weighted = (k for q in self.questions for k in q.ministry_weights)
        return _ordered([*self.ministries, *weighted])

    def ministry_info(self, ministry_id: str) -> MinistryInfo:
        info = self.ministries.get(ministry_id)
        if info is not None:
            return info
        return MinistryInfo(name=ministry_id.replace("-", " ").title())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ordered(keys: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(keys))


def in_domain(question: QuestionDefinition, value: Any) -> bool:
    """Exact-type membership in the question's declared answer options."""
    return any(
        type(value) is type(option) and value == option
        for option in question.option_values
    )


def _check_question(q: QuestionDefinition, catalog: Catalog) -> None:
    if q.type == "likert":
        for v in q.option_values:
            if not isinstance(v, int) or not 0 <= v <= settings.likert.maximum:
                raise CatalogIntegrityError(
                    f"{q.id}: likert option {v!r} outside 0..{settings.likert.maximum}"
                )
    elif q.type == "yes-no":
        if set(q.option_values) != {YES, NO}:
            raise CatalogIntegrityError(f"{q.id}: yes-no options must be 'yes' and 'no'")
    else:
        if not q.option_values:
            raise CatalogIntegrityError(f"{q.id}: multiple-choice question without options")
        if q.gift_weights or q.trait_weights or q.ministry_weights:
            raise CatalogIntegrityError(f"{q.id}: multiple-choice answers carry no weights")
        if q.qualification_category:
            raise CatalogIntegrityError(
                f"{q.id}: qualification questions must be likert or yes-no"
            )

    for label, value in (
        ("correct_answer", q.correct_answer),
        ("disqualifying_answer", q.disqualifying_answer),
        ("activating_answer", q.activating_answer),
    ):
        if value is not None and not in_domain(q, value):
            raise CatalogIntegrityError(
                f"{q.id}: {label} {value!r} is not a valid {q.type} answer"
            )

    if q.qualification_category and q.qualification_weight is None:
        raise CatalogIntegrityError(f"{q.id}: qualification category without a weight")
    if q.qualification_weight is not None and not q.qualification_category:
        raise CatalogIntegrityError(f"{q.id}: qualification weight without a category")
    if q.disqualifying_answer is not None and not q.qualification_category:
        raise CatalogIntegrityError(f"{q.id}: disqualifying answer without a category")
    if q.skill_points is not None and not q.skill_category:
        raise CatalogIntegrityError(f"{q.id}: skill points without a skill category")
    if (q.literacy_points is None) != (q.literacy_bucket is None):
        raise CatalogIntegrityError(f"{q.id}: literacy bucket and points go together")

    if catalog.ministries:
        unknown = sorted(set(q.ministry_weights) - set(catalog.ministries))
        if unknown:
            raise CatalogIntegrityError(f"{q.id}: undeclared ministries {unknown}")


def check_integrity(catalog: Catalog) -> None:
    """Raise CatalogIntegrityError on any authoring bug in the catalog."""
    by_id: dict[str, QuestionDefinition] = {}
    for q in catalog.questions:
        if q.id in by_id:
            raise CatalogIntegrityError(f"duplicate question id {q.id!r}")
        by_id[q.id] = q

    for q in catalog.questions:
        _check_question(q, catalog)
        if q.conditional_trigger is None:
            continue
        trigger = by_id.get(q.conditional_trigger)
        if trigger is None:
            raise CatalogIntegrityError(
                f"{q.id}: conditional trigger {q.conditional_trigger!r} does not exist"
            )
        if trigger.activating_answer is None:
            raise CatalogIntegrityError(
                f"{q.id}: trigger {trigger.id!r} declares no activating answer"
            )

    for q in catalog.questions:
        seen = {q.id}
        current = q
        while current.conditional_trigger is not None:
            if current.conditional_trigger in seen:
                raise CatalogIntegrityError(f"{q.id}: conditional trigger cycle")
            seen.add(current.conditional_trigger)
            current = by_id[current.conditional_trigger]

    skill_categories = set(catalog.skill_categories())
    for ministry_id, info in catalog.ministries.items():
        if info.skill_category and info.skill_category not in skill_categories:
            raise CatalogIntegrityError(
                f"{ministry_id}: unknown skill category {info.skill_category!r}"
            )
        restriction = info.restricted_to
        if restriction is None:
            continue
        question = by_id.get(restriction.question)
        if question is None:
            raise CatalogIntegrityError(
                f"{ministry_id}: restriction question {restriction.question!r} does not exist"
            )
        for value in restriction.values:
            if not in_domain(question, value):
                raise CatalogIntegrityError(
                    f"{ministry_id}: restriction value {value!r} is not a valid answer to {question.id}"
                )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_catalog(path: Path | str) -> Catalog:
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    catalog = Catalog.model_validate(raw)
    logger.info(
        "Loaded catalog %s: %d questions, %d ministries",
        catalog.version, len(catalog.questions), len(catalog.ministry_ids()),
    )
    return catalog


@lru_cache(maxsize=1)
def load_default_catalog() -> Catalog:
    return load_catalog(settings.catalog_path)
