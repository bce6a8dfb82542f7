"""Fretboard Architect — Streamlit Voicing Browser.

Minimal interactive application:
    1. Enter chord tones as pitch classes and pick a tuning
    2. Adjust the search bounds
    3. View ranked voicings with their ergonomic breakdown
    4. Download the voicings as JSON

Constraints:
    - No fretboard drawing, no audio playback
    - Simple, readable code
"""

from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# Ensure the project root is importable
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from src.voicing_engine.annotate import voicings_to_json_bytes  # noqa: E402
from src.voicing_engine.cost_model import ErgonomicCostModel  # noqa: E402
from src.voicing_engine.labels import difficulty_tier, shape_type, tab_shorthand  # noqa: E402
from src.voicing_engine.solver import SearchConfig, generate_voicings  # noqa: E402
from src.voicing_engine.tunings import load_tunings  # noqa: E402

# ── Page config ───────────────────────────────────────────────
st.set_page_config(
    page_title="Fretboard Architect — Voicing Browser",
    page_icon="🎸",
    layout="wide",
)

st.title("🎸 Fretboard Architect — Voicing Browser")
st.markdown(
    "Enter chord tones as pitch classes (C=0 … B=11), choose a tuning, "
    "and browse voicings ranked by ergonomic cost."
)
st.divider()

# ── Inputs ────────────────────────────────────────────────────
tunings = load_tunings()
col_pcs, col_inst, col_tuning = st.columns([2, 1, 1])
pcs_text: str = col_pcs.text_input("Pitch classes", value="0 4 7")
instrument: str = col_inst.selectbox("Instrument", sorted(tunings))
tuning_name: str = col_tuning.selectbox("Tuning", sorted(tunings[instrument]))

try:
    pitch_classes = [int(tok) for tok in pcs_text.replace(",", " ").split()]
except ValueError:
    st.error("Pitch classes must be whole numbers separated by spaces or commas.")
    st.stop()

string_count = len(tunings[instrument][tuning_name])
c1, c2, c3, c4, c5 = st.columns(5)
root: int = c1.number_input("Bass pitch class", 0, 11, value=pitch_classes[0] % 12 if pitch_classes else 0)
max_fret: int = c2.slider("Max fret", 0, 24, 12)
max_span: int = c3.slider("Max span", 1, 7, 4)
max_fingers: int = c4.slider("Max fingers", 1, 5, 4)
min_sounded: int = c5.slider("Min strings", 1, string_count, min(4, string_count))
allow_open: bool = st.checkbox("Allow open strings", value=True)

run_clicked: bool = st.button("▶  Find Voicings", type="primary")

if run_clicked:
    with st.spinner("Searching the fretboard …"):
        config = SearchConfig(
            max_span=max_span,
            max_fingers=max_fingers,
            min_sounded=min_sounded,
            max_results=50,
            allow_open=allow_open,
        )
        voicings = generate_voicings(
            pitch_classes,
            root,
            tunings[instrument][tuning_name],
            max_fret,
            config,
            ErgonomicCostModel(),
        )

    if not voicings:
        st.warning("No playable voicing found. Try raising the max fret, span or fingers.")
        st.stop()

    # ── Summary stats ─────────────────────────────────────────
    st.subheader("Summary")
    m1, m2, m3 = st.columns(3)
    m1.metric("Voicings", len(voicings))
    m2.metric("Best", tab_shorthand(voicings[0]))
    m3.metric("Best cost", f"{voicings[0].total_cost:.3f}")

    # ── Voicing table ─────────────────────────────────────────
    st.subheader("Ranked Voicings")
    rows = []
    for voicing in voicings:
        row = {
            "Tab": tab_shorthand(voicing),
            "Shape": shape_type(voicing),
            "Difficulty": difficulty_tier(voicing.total_cost),
        }
        row.update(voicing.breakdown.as_dict())
        rows.append(row)
    df = pd.DataFrame(rows)
    st.dataframe(df, use_container_width=True, height=400)

    # ── Downloads ─────────────────────────────────────────────
    st.subheader("Downloads")
    st.download_button(
        label="⬇  Download voicings.json",
        data=voicings_to_json_bytes(voicings),
        file_name=f"{instrument}_{tuning_name}_voicings.json",
        mime="application/json",
    )
