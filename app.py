"""Streamlit UI for inspecting the Volunteer Assessment Scoring Engine."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pandas as pd
import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parent))

from src.assessment.catalog import CatalogIntegrityError, load_default_catalog  # noqa: E402
from src.assessment.config import settings  # noqa: E402
from src.assessment.engine import (  # noqa: E402
    load_answers_from_json,
    load_sample_answers,
    run,
)
from src.assessment.models import AnswerSet, AssessmentResult  # noqa: E402

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

st.set_page_config(page_title="Volunteer Assessment Engine", layout="wide")
st.title("Volunteer Assessment — Scoring Engine Explorer")

TIER_LABELS = {"low": "Low", "developing": "Developing", "strong": "Strong"}

_UPLOAD_HELP = """\
Upload a JSON object mapping question ids to answers:

```json
{
  "sg1": 5,
  "bl1": "c",
  "st0": "yes",
  "st1": "b",
  "cy1": "yes",
  "cy6": "no"
}
```

Likert answers are integers 1-5 (some questions accept `0` for
"I don't know"); yes/no answers are `"yes"`/`"no"` or booleans.
Unknown ids and out-of-range values are reported as warnings.
"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _safe(text: str) -> str:
    """Escape dollar signs to prevent Streamlit LaTeX rendering."""
    return text.replace("$", r"\$")


def _run_engine(answers: AnswerSet) -> AssessmentResult | None:
    try:
        return run(answers)
    except CatalogIntegrityError as e:
        st.error(f"Catalog error: {e}")
        return None


def _render_overview(result: AssessmentResult) -> None:
    c = result.completeness
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Answered", c.answered)
    col2.metric("Active", c.active)
    col3.metric("Unsure", c.unsure)
    col4.metric(
        "Completion",
        "—" if c.completion_rate is None else f"{c.completion_rate:.0%}",
    )
    if result.warnings:
        with st.expander(f"{len(result.warnings)} answer warnings", expanded=True):
            df = pd.DataFrame([w.model_dump() for w in result.warnings])
            st.dataframe(df, use_container_width=True, hide_index=True)


def _render_gifts(result: AssessmentResult) -> None:
    profile = result.gift_profile
    st.subheader("Spiritual Gifts")
    if not profile.assessed:
        st.caption("Not assessed.")
        return
    top = len(profile.scores)
    if top > 1:
        top = st.slider("Show top N gifts", 1, top, min(5, top))
    df = pd.DataFrame([g.model_dump() for g in profile.top(top)]).set_index("rank")
    st.bar_chart(df.set_index("gift")["score"])
    st.dataframe(df, use_container_width=True)


def _render_behavioral(result: AssessmentResult) -> None:
    profile = result.behavioral_profile
    st.subheader("Behavioral Style")
    if not profile.assessed:
        st.caption("Not assessed.")
        return
    cols = st.columns(len(profile.percentages))
    for col, (trait, pct) in zip(cols, profile.percentages.items()):
        col.metric(trait, f"{pct}%")
    secondary = profile.secondary_trait or "none (clearly dominant)"
    st.markdown(f"**Primary:** {profile.primary_trait} · **Secondary:** {secondary}")


def _render_literacy(result: AssessmentResult) -> None:
    profile = result.literacy_profile
    st.subheader("Scripture Literacy")
    if not profile.assessed:
        st.caption("Not assessed.")
    else:
        col1, col2, col3 = st.columns(3)
        col1.metric("Tier", TIER_LABELS[profile.tier])
        col2.metric("Overall", f"{profile.percentage:.1f}%")
        col3.metric("Correct answers", profile.correct_answers)
    if profile.buckets:
        df = pd.DataFrame([b.model_dump() for b in profile.buckets]).set_index("bucket")
        st.dataframe(df, use_container_width=True)


def _render_skills(result: AssessmentResult) -> None:
    st.subheader("Technical Skills")
    rows = [r.model_dump() for r in result.skill_profile.categories.values()]
    if not rows:
        st.caption("No skill categories in the catalog.")
        return
    st.dataframe(
        pd.DataFrame(rows).set_index("category"),
        use_container_width=True,
    )


def _render_ministries(result: AssessmentResult) -> None:
    st.subheader("Ministry Recommendations")
    if not result.ministry_recommendations:
        st.caption("No ministry received a positive affinity.")
        return
    for rec in result.ministry_recommendations:
        label = "Primary" if rec.is_primary else "Also consider"
        col1, col2, col3 = st.columns([3, 1, 1])
        col1.markdown(f"**#{rec.rank} {_safe(rec.name)}** — {rec.category}")
        col2.metric("Affinity", f"{rec.score:.2f}")
        col3.caption(f"{label} · {rec.contributing_questions} answers")
        if rec.requires_skill_verification:
            col1.caption("Skill check required before joining")


def _render_eligibility(result: AssessmentResult) -> None:
    st.subheader("Sensitive-Ministry Eligibility")
    for track, res in result.eligibility.items():
        title = track.replace("-", " ").title()
        if res.eligible is None:
            st.markdown(f"**{title}:** not assessed")
        elif res.eligible:
            st.success(f"{title}: eligible ({res.score:.1f} / {res.max_score:.1f})")
        else:
            st.error(f"{title}: not eligible — vetoed by {', '.join(res.veto_reasons)}")


def _render_result(result: AssessmentResult) -> None:
    st.markdown("---")
    st.header(f"Results (catalog {result.catalog_version})")
    _render_overview(result)
    left, right = st.columns(2)
    with left:
        _render_gifts(result)
        _render_literacy(result)
    with right:
        _render_behavioral(result)
        _render_skills(result)
    _render_ministries(result)
    _render_eligibility(result)
    with st.expander("Raw result JSON"):
        st.json(result.model_dump(mode="json"))


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

with st.sidebar:
    st.header("Catalog")
    try:
        catalog = load_default_catalog()
        st.success(f"Version {catalog.version}")
        st.caption(f"{len(catalog.questions)} questions · {len(catalog.ministry_ids())} ministries")
    except (CatalogIntegrityError, OSError, ValueError) as e:
        st.error(f"Could not load catalog: {e}")
    st.markdown("---")
    st.caption(f"Catalog path: `{settings.catalog_path}`")


# ---------------------------------------------------------------------------
# Main tabs
# ---------------------------------------------------------------------------

tab_sample, tab_upload = st.tabs(["Sample Answer Sets", "Upload JSON"])

# --- Tab 1: Sample answer sets ---
with tab_sample:
    st.subheader("Run with built-in answer sets")
    samples = load_sample_answers()
    name = st.radio("Answer set", list(samples), horizontal=True)
    answers = samples[name]
    with st.expander(f"{len(answers)} answers", expanded=False):
        st.json(answers)

    if st.button("Score Answers", key="run_sample", type="primary"):
        result = _run_engine(answers)
        if result:
            _render_result(result)


# --- Tab 2: Upload JSON ---
with tab_upload:
    st.subheader("Upload a custom answer set")
    st.markdown(_UPLOAD_HELP)
    uploaded = st.file_uploader("Upload JSON", type=["json"])
    if uploaded:
        try:
            answers = load_answers_from_json(json.loads(uploaded.read()))
            st.success(f"Loaded {len(answers)} answers")

            if st.button("Score Answers", key="run_upload", type="primary"):
                result = _run_engine(answers)
                if result:
                    _render_result(result)
        except Exception as e:
            st.error(f"Error loading JSON: {e}")
