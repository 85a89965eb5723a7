"""Unit tests for ministry affinity ranking."""

from __future__ import annotations

from src.assessment.config import settings
from src.assessment.normalizer import normalize
from src.assessment.scoring import skills
from src.assessment.scoring.ministry import affinities, rank


def _likert(qid: str, weights: dict[str, float]) -> dict:
    return {"id": qid, "section": 4, "type": "likert", "ministry_weights": weights}


def _rank(catalog, answers):
    return rank(catalog, normalize(catalog, answers).responses)


class TestMinistryRanking:
    def test_top_ministry_anchors_at_one(self, make_catalog):
        cat = make_catalog(_likert("q1", {"alpha": 2.0}), _likert("q2", {"beta": 1.0}))
        recs = _rank(cat, {"q1": 5, "q2": 5})
        assert [(r.ministry_id, r.score) for r in recs] == [("alpha", 1.0), ("beta", 0.5)]
        assert recs[0].raw_score == 4.0

    def test_primary_and_secondary_threshold(self, make_catalog):
        weights = {"m1": 2.0, "m2": 1.8, "m3": 1.6, "m4": 1.2, "m5": 0.8}
        cat = make_catalog(*[_likert(f"q{m}", {m: w}) for m, w in weights.items()])
        recs = _rank(cat, {f"q{m}": 5 for m in weights})
        assert [r.ministry_id for r in recs] == ["m1", "m2", "m3", "m4"]
        assert [r.is_primary for r in recs] == [True, True, True, False]
        assert [r.rank for r in recs] == [1, 2, 3, 4]
        assert recs[3].score > settings.ministry.secondary_threshold

    def test_capped_at_max_recommendations(self, make_catalog):
        cat = make_catalog(*[_likert(f"q{i}", {f"m{i}": 1.0}) for i in range(1, 9)])
        recs = _rank(cat, {f"q{i}": 5 for i in range(1, 9)})
        assert len(recs) == settings.ministry.max_recommendations
        assert [r.ministry_id for r in recs] == [f"m{i}" for i in range(1, 7)]
        assert all(r.score == 1.0 for r in recs)

    def test_tie_broken_by_contribution_count(self, make_catalog):
        cat = make_catalog(
            _likert("q1", {"a": 2.0}),
            _likert("q2", {"b": 1.0}),
            _likert("q3", {"b": 1.0}),
        )
        recs = _rank(cat, {"q1": 5, "q2": 5, "q3": 5})
        assert [r.ministry_id for r in recs] == ["b", "a"]

    def test_negative_affinity_only_yields_nothing(self, make_catalog):
        cat = make_catalog(_likert("q1", {"a": 1.0}))
        assert _rank(cat, {"q1": 1}) == []

    def test_neutral_answers_do_not_count(self, make_catalog):
        cat = make_catalog(_likert("q1", {"a": 1.0}), _likert("q2", {"b": 1.0}))
        raw, counts = affinities(normalize(cat, {"q1": 3, "q2": 4}).responses)
        assert raw == {"a": 0.0, "b": 1.0}
        assert counts == {"b": 1}
        assert [r.ministry_id for r in _rank(cat, {"q1": 3, "q2": 4})] == ["b"]

    def test_fallback_display_name(self, make_catalog):
        cat = make_catalog(_likert("q1", {"prayer-team": 1.0}))
        rec = _rank(cat, {"q1": 5})[0]
        assert rec.name == "Prayer Team"
        assert rec.category == "General"

    def test_zero_affinity_never_primary(self, make_catalog):
        cat = make_catalog(
            _likert("q1", {"a": 1.0}),
            _likert("q2", {"b": 1.0}),
            _likert("q3", {"b": 1.0}),
        )
        raw, counts = affinities(normalize(cat, {"q1": 5, "q2": 5, "q3": 1}).responses)
        assert raw["b"] == 0.0
        assert counts["b"] == 2
        recs = _rank(cat, {"q1": 5, "q2": 5, "q3": 1})
        assert [(r.ministry_id, r.is_primary) for r in recs] == [("a", True)]


class TestMinistryRankingOnCatalog:
    def test_yes_answer_contributes_weight(self, catalog):
        recs = _rank(catalog, {"ms11": "yes"})
        assert len(recs) == 1
        assert recs[0].ministry_id == "worship"
        assert recs[0].name == "Worship Team"
        assert recs[0].category == "Worship Arts"
        assert recs[0].is_primary

    def test_no_answer_contributes_nothing(self, catalog):
        assert _rank(catalog, {"ms11": "no"}) == []

    def test_gated_questions_excluded(self, catalog):
        assert _rank(catalog, {"sg_intro": "no", "gs1": 5, "gs2": 5}) == []
        recs = _rank(catalog, {"sg_intro": "yes", "gs1": 5, "gs2": 5})
        assert recs[0].ministry_id == "griefshare"

    def test_weights_from_every_section(self, catalog):
        recs = _rank(catalog, {"st10": "yes", "st12": 5})
        assert recs[0].ministry_id == "livestream"
        assert recs[0].contributing_questions == 2


NEXT_GEN = {"ms6": 5, "ms7": 5, "ms8": 5}


class TestMinistryRestrictions:
    def test_male_respondent_not_offered_nursery(self, catalog):
        recs = _rank(catalog, {"sex": "male", **NEXT_GEN})
        assert [r.ministry_id for r in recs] == ["children", "youth"]

    def test_female_respondent_offered_nursery(self, catalog):
        recs = _rank(catalog, {"sex": "female", **NEXT_GEN})
        assert [r.ministry_id for r in recs] == ["children", "nursery", "youth"]

    def test_unanswered_restriction_keeps_ministry(self, catalog):
        recs = _rank(catalog, NEXT_GEN)
        assert "nursery" in [r.ministry_id for r in recs]

    def test_restricted_ministry_cannot_anchor(self, make_catalog):
        cat = make_catalog(
            {"id": "who", "section": 0, "type": "multiple-choice",
             "options": [{"value": "x"}, {"value": "y"}]},
            _likert("q1", {"only-x": 2.0, "open": 1.0}),
            ministries={
                "only-x": {"name": "Only X",
                           "restricted_to": {"question": "who", "values": ["x"]}},
                "open": {"name": "Open"},
            },
        )
        recs = _rank(cat, {"who": "y", "q1": 5})
        assert [(r.ministry_id, r.score) for r in recs] == [("open", 1.0)]


class TestSkillVerification:
    def test_flag_carried_from_catalog(self, catalog):
        recs = {r.ministry_id: r for r in _rank(catalog, {"ms3": 5})}
        assert recs["worship"].requires_skill_verification
        assert recs["sound"].requires_skill_verification
        assert not recs["ushers"].requires_skill_verification

    def test_demonstrated_skill_clears_flag(self, catalog):
        answers = {"ms3": 5, "st0": "yes", "st1": "b", "st2": "b", "st3": "b",
                   "st4": "b", "st5": "b", "st6": 5, "st7": 5}
        responses = normalize(catalog, answers).responses
        recs = {r.ministry_id: r for r in rank(catalog, responses, skills.score(catalog, responses))}
        assert not recs["sound"].requires_skill_verification
        assert recs["worship"].requires_skill_verification

    def test_weak_skill_keeps_flag(self, catalog):
        answers = {"ms3": 5, "st0": "yes", "st1": "b"}
        responses = normalize(catalog, answers).responses
        recs = {r.ministry_id: r for r in rank(catalog, responses, skills.score(catalog, responses))}
        assert recs["sound"].requires_skill_verification
