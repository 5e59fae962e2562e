"""isofinger — Streamlit Chord Fingering UI.

Minimal interactive application:
    1. Upload a handprints JSON file
    2. Pick a device, hand and chord
    3. View the ranked fingering table
    4. Download the suggestions as JSON and the best one as MIDI

Constraints:
    - No grid rendering
    - No MIDI playback
"""

from __future__ import annotations

import json
import sys
import tempfile
from pathlib import Path

import streamlit as st

# Ensure the project root is importable
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from isofinger.errors import InvalidHandprint  # noqa: E402
from isofinger.fingering_engine.handprints import parse_handprints  # noqa: E402
from isofinger.fingering_engine.suggest import (  # noqa: E402
    STRATEGIES,
    export_fingering_midi,
    suggest,
    suggestions_to_json_bytes,
)
from isofinger.grid.devices import get_device, grid_for_device, list_devices  # noqa: E402
from isofinger.main import candidates_table  # noqa: E402
from isofinger.theory.pitch import format_pcs  # noqa: E402

# ── Page config ───────────────────────────────────────────────
st.set_page_config(
    page_title="isofinger — Chord Fingerings",
    page_icon="🎹",
    layout="wide",
)

st.title("🎹 isofinger — Chord Fingerings")
st.markdown(
    "Upload your captured handprints, pick a chord and get ranked "
    "fingering suggestions for your grid controller."
)
st.divider()

# ── Inputs ────────────────────────────────────────────────────
uploaded_file = st.file_uploader(
    "Choose a handprints file",
    type=["json"],
    help="A JSON array of handprints exported from a capture session.",
)

devices = list_devices()
col_dev, col_hand, col_strategy = st.columns(3)
device_type: str = col_dev.selectbox(
    "Device",
    [d["type"] for d in devices],
    format_func=lambda key: get_device(key)["name"],
)
hand: str = col_hand.radio("Hand", ["right", "left"], horizontal=True)
strategy: str = col_strategy.selectbox("Strategy", STRATEGIES)

col_chord, col_max = st.columns([3, 1])
chord: str = col_chord.text_input("Chord", value="Cmaj7", help="Chord name (Cmaj7, F#m7b5) or pitch classes (0,4,7)")
max_suggestions: int = col_max.number_input("Suggestions", min_value=1, max_value=20, value=5)

handprints: list = []
if uploaded_file is not None:
    try:
        handprints = parse_handprints(json.loads(uploaded_file.getvalue()), source=uploaded_file.name)
        st.success(f"Loaded **{len(handprints)}** handprints from **{uploaded_file.name}**")
    except (json.JSONDecodeError, InvalidHandprint) as exc:
        st.error(f"Could not read handprints: {exc}")

# ── Run ───────────────────────────────────────────────────────
if st.button("▶  Suggest Fingerings", type="primary"):
    device = get_device(device_type)
    result = suggest(
        chord,
        handprints,
        grid=grid_for_device(device_type),
        hand=hand,
        base_midi=device["base_midi"],
        strategy=strategy,
        max_suggestions=int(max_suggestions),
    )

    st.subheader("Summary")
    c1, c2, c3 = st.columns(3)
    c1.metric("Pitch Classes", format_pcs(result["target_pitch_classes"]) or "–")
    c2.metric("Source", result["source"] or "–")
    c3.metric("Candidates", len(result["candidates"]))

    if result["status"] == "ok":
        st.info(result["message"])
    else:
        st.warning(result["message"])

    if result["candidates"]:
        st.subheader("Ranked Fingerings")
        st.dataframe(candidates_table(result["candidates"]), use_container_width=True)

        best = result["candidates"][0]
        st.caption(f"Best fingering: {best['ergonomics']['recommendation']}")

        # ── Downloads ─────────────────────────────────────────
        st.subheader("Downloads")
        st.download_button(
            label="⬇  Download suggestions.json",
            data=suggestions_to_json_bytes(result),
            file_name="suggestions.json",
            mime="application/json",
        )
        with tempfile.TemporaryDirectory() as out_dir:
            midi_path = export_fingering_midi(best, Path(out_dir) / "fingering.mid")
            st.download_button(
                label="⬇  Download best fingering as MIDI",
                data=midi_path.read_bytes(),
                file_name="fingering.mid",
                mime="audio/midi",
            )
