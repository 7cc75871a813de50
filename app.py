"""
Okey Simulator Web App
Streamlit interface for discard advice and batch simulations.
"""

import random

import pandas as pd
import streamlit as st

from okey_sim.engine.deck import FULL_DECK
from okey_sim.engine.game import GameState, chest_for_score
from okey_sim.engine.strategy import DiscardAdvisor, find_best_moves
from okey_sim.simulator import Simulator
from okey_sim.presets import PRESETS

# Page config
st.set_page_config(
    page_title="Okey Simulator",
    page_icon="🃏",
    layout="wide"
)

st.title("🃏 Okey Simulator")
st.markdown("*Combination finder, discard advisor and Monte Carlo chest odds*")

# Sidebar for settings
st.sidebar.header("Settings")

preset_options = list(PRESETS.keys())
selected_preset = st.sidebar.selectbox(
    "Preset",
    options=preset_options,
    format_func=lambda x: PRESETS[x].name
)
st.sidebar.markdown(f"*{PRESETS[selected_preset].description}*")

mode = st.sidebar.radio("Mode", ["Hand Advice", "Batch Runs"])
seed = st.sidebar.number_input("Seed (0 = random)", min_value=0, value=0, step=1)

st.divider()

card_ids = [c.id for c in FULL_DECK]

if mode == "Hand Advice":
    removed_ids = st.multiselect("Removed cards", card_ids)
    hand_ids = st.multiselect(
        "Hand (up to 5)",
        [i for i in card_ids if i not in removed_ids],
        max_selections=5,
    )
    current_score = st.number_input("Current score", min_value=0, value=0, step=10)
    with_chest = st.checkbox("Estimate chest odds for the top discard")

    state = GameState.from_snapshot({
        "removedCardIds": removed_ids,
        "handIds": hand_ids,
        "currentScore": int(current_score),
    }, config=PRESETS[selected_preset].build_config())

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Score", state.score)
    with col2:
        st.metric("Chest", chest_for_score(state.score, state.config).value.title())
    with col3:
        st.metric("Cards left to draw", len(state.draw_pool()))

    moves = find_best_moves(state.hand.cards)
    if moves:
        st.subheader("✅ Playable combinations")
        for move in moves:
            st.code(str(move))
    elif state.hand.is_full():
        advisor = DiscardAdvisor(config=state.config,
                                 rng=random.Random(seed or None))
        with st.spinner("Analyzing discards..."):
            suggestions = advisor.analyze(state.hand.cards, state.removed,
                                          state.score, include_chest_stats=with_chest)

        if not suggestions:
            st.warning("No cards left to draw, no further advice available.")
        else:
            st.subheader("🗑️ Discard ranking")
            st.dataframe(pd.DataFrame([s.to_dict() for s in suggestions]),
                         use_container_width=True)

            odds = suggestions[0].chest_odds
            if odds:
                st.subheader(f"Chest odds after discarding {suggestions[0].card.id}")
                st.bar_chart(pd.DataFrame({
                    "Chest": ["Bronze", "Silver", "Gold"],
                    "Share": [odds.bronze, odds.silver, odds.gold],
                }).set_index("Chest"))
    else:
        st.info("Fill all five slots to get discard advice.")

else:  # Batch mode
    num_runs = st.sidebar.slider("Number of Games", min_value=50, max_value=2000, value=500, step=50)

    if st.button("🎲 Run Simulation", type="primary", use_container_width=True):
        progress_bar = st.progress(0)
        status_text = st.empty()

        def show_progress(done, total):
            progress_bar.progress(done / total)
            status_text.text(f"Game {done}/{total}...")

        sim = Simulator(selected_preset, seed=seed or None)
        stats = sim.run_batch(num_runs, on_progress=show_progress)

        progress_bar.empty()
        status_text.empty()

        st.subheader(f"Results ({stats.total_games} games)")

        odds = stats.chest_odds
        if odds.gold > 0.5:
            st.success(f"🏆 Gold rate: {stats.gold_count}/{stats.total_games} ({odds.gold:.1%})")
        else:
            st.warning(f"Gold rate: {stats.gold_count}/{stats.total_games} ({odds.gold:.1%})")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Avg Score", f"{stats.average_score:.0f}")
        with col2:
            st.metric("High Score", stats.high_score)
        with col3:
            st.metric("Silver", stats.silver_count)
        with col4:
            st.metric("Bronze", stats.bronze_count)

        st.subheader("Chest Distribution")
        chart_data = pd.DataFrame({
            "Chest": ["Bronze", "Silver", "Gold"],
            "Games": [stats.bronze_count, stats.silver_count, stats.gold_count],
        })
        st.bar_chart(chart_data.set_index("Chest"))

# Footer
st.divider()
st.markdown("*Built with the okey_sim engine*")
