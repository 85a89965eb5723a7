"""Integration-level tests — full scoring runs against the shipped catalog."""

import json

import pytest

from src.assessment.catalog import CatalogIntegrityError
from src.assessment.config import DATA_DIR, settings
from src.assessment.engine import load_answers_from_json, load_sample_answers, run, score
from src.assessment.normalizer import normalize


@pytest.fixture(scope="module")
def samples():
    return load_sample_answers()


def test_sample_answers_load(samples):
    assert list(samples) == [
        "maria_educator", "james_background_check", "new_attendee", "messy_submission",
    ]
    assert all(answers for answers in samples.values())


def test_answer_set_shape_is_validated():
    with pytest.raises(ValueError):
        load_answers_from_json({"sg1": [5]})
    assert load_answers_from_json({"sg1": 5, "st0": True}) == {"sg1": 5, "st0": True}


def test_score_is_deterministic(catalog, samples):
    for answers in samples.values():
        first = score(catalog, answers).model_dump_json()
        second = score(catalog, dict(reversed(list(answers.items())))).model_dump_json()
        assert first == second


def test_score_accepts_raw_catalog(catalog, samples):
    with open(DATA_DIR / "catalog.json") as f:
        raw = json.load(f)
    answers = samples["maria_educator"]
    assert score(raw, answers) == score(catalog, answers)


def test_run_uses_default_catalog(catalog, samples):
    answers = samples["new_attendee"]
    assert run(answers) == score(catalog, answers)


def test_invalid_catalog_refuses_to_score():
    raw = {"version": "bad", "questions": [
        {"id": "a", "section": 1, "type": "likert", "conditional_trigger": "missing"},
    ]}
    with pytest.raises(CatalogIntegrityError):
        score(raw, {"a": 5})


class TestPersonas:
    def test_full_submission(self, catalog, samples):
        result = score(catalog, samples["maria_educator"])
        assert result.catalog_version == "2025.1"
        assert result.warnings == []
        assert result.gift_profile.assessed
        assert sum(result.behavioral_profile.percentages.values()) == 100
        assert result.literacy_profile.tier in ("low", "developing", "strong")
        assert result.skill_profile["sound"].level == "competent"
        assert result.skill_profile["sound"].can_serve
        assert result.ministry_recommendations[0].score == 1.0
        assert len(result.primary_ministries) == settings.ministry.primary_count
        assert result.eligibility["children"].eligible is True
        assert result.eligibility["youth"].eligible is True
        assert result.eligibility["grief-support"].eligible is None
        assert result.completeness.unsure == 1

    def test_background_check_concern(self, catalog, samples):
        result = score(catalog, samples["james_background_check"])
        children = result.eligibility["children"]
        assert children.eligible is False
        assert children.veto_reasons == ["cy6"]
        assert result.eligibility["youth"].eligible is True
        assert result.skill_profile["sound"].level == "not-assessed"

    def test_sparse_submission(self, catalog, samples):
        result = score(catalog, samples["new_attendee"])
        assert not result.literacy_profile.assessed
        assert all(b.percentage is None for b in result.literacy_profile.buckets)
        assert result.eligibility["children"].eligible is None
        assert result.eligibility["welcome-team"].eligible is True
        assert result.skill_profile["sound"].level == "not-assessed"

    def test_messy_submission_warns_and_continues(self, catalog, samples):
        answers = samples["messy_submission"]
        result = score(catalog, answers)
        assert [(w.question_id, w.code) for w in result.warnings] == [
            ("sg1", "malformed_answer"),
            ("sg3", "malformed_answer"),
            ("bl1", "malformed_answer"),
            ("legacy_question", "unknown_question"),
        ]
        assert result.warnings == normalize(catalog, answers).warnings
        assert result.skill_profile["sound"].level == "not-assessed"
        assert result.eligibility["children"].eligible is None
        # "YES" canonicalizes; tied weights fall back to declared ministry order
        assert [r.ministry_id for r in result.ministry_recommendations] == ["dance", "drama"]
        assert result.completeness.active == 4
