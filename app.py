import streamlit as st
import pandas as pd
import plotly.express as px
import json
from pathlib import Path

from config import SimulationConfig
from events import current_headline
from interventions import INTERVENTIONS, Outcome, can_afford, intervention_cost
from region import RegionName
from reporting import calendar_date, format_with_million, region_summary
from scheduler import GameLoop
from world import get_selected_region, initial_world_state, world_from_dict, world_statistics, world_to_dict

# Page Config
st.set_page_config(
    page_title="Existential Risk",
    page_icon="🌍",
    layout="wide",
    initial_sidebar_state="expanded"
)

OUTPUT_DIR = Path("output")
SNAPSHOT_FILE = OUTPUT_DIR / "world_state.json"


def _new_loop(world=None) -> GameLoop:
    config = SimulationConfig(num_days=0, game_speed=1, output_dir=OUTPUT_DIR)
    return GameLoop(world or initial_world_state(config), config)


def _record(loop: GameLoop):
    """Append the current day's per-region values to the session history."""
    for cs in loop.world.regions:
        st.session_state.history.append({
            'day': loop.world.day,
            'region': cs.name.value,
            'population': cs.total_population,
            'happiness': cs.happiness,
            'conflict': cs.conflict_level,
            'finance': cs.finance_index,
            'education': cs.education_index,
            'tech': cs.tech_index,
        })


# --- Session state ---
if 'loop' not in st.session_state:
    st.session_state.loop = _new_loop()
    st.session_state.history = []
    st.session_state.messages = []
    _record(st.session_state.loop)

loop: GameLoop = st.session_state.loop

# --- Sidebar ---
st.sidebar.title("🌍 World Control")

names = [name.value for name in RegionName]
current = loop.world.selected_region_name
choice = st.sidebar.selectbox(
    "Selected region", ["(none)"] + names,
    index=0 if current is None else names.index(current.value) + 1
)
loop.select_region(None if choice == "(none)" else choice)

speed = st.sidebar.slider("Days per step", 1, 90, 7)
if st.sidebar.button("Advance"):
    for _ in range(speed):
        loop.run_days(1)
        _record(loop)

col_save, col_load = st.sidebar.columns(2)
if col_save.button("Save"):
    OUTPUT_DIR.mkdir(exist_ok=True)
    with open(SNAPSHOT_FILE, 'w') as f:
        json.dump(world_to_dict(loop.world), f, indent=2)
    st.sidebar.success(f"Saved to {SNAPSHOT_FILE}")
if col_load.button("Load") and SNAPSHOT_FILE.exists():
    with open(SNAPSHOT_FILE) as f:
        st.session_state.loop = loop = _new_loop(world_from_dict(json.load(f)))
    st.session_state.history = []
    _record(loop)

if st.sidebar.button("Reset world"):
    st.session_state.loop = loop = _new_loop()
    st.session_state.history = []
    st.session_state.messages = []
    _record(loop)

# --- Top bar ---
world = loop.world
today = calendar_date(world.day, loop.config.start_date)
st.title(f"Current date: {today.isoformat()}")
st.caption(f"Your budget: {world.global_budget / 1e6:.1f} million USD")
st.info(f"📰 News: {current_headline(world.day, rotation_days=loop.config.news_rotation_days)}")

# --- Interventions ---
selected = get_selected_region(world)
if selected is None:
    st.write("Select a region to open actions.")
else:
    st.subheader(f"Actions for {selected.name}")
    columns = st.columns(len(INTERVENTIONS))
    for column, intervention in zip(columns, INTERVENTIONS):
        cost = intervention_cost(intervention, selected)
        help_text = f"{intervention.description}\n\n{intervention.additional_description}"
        label = f"{intervention.name}\n{format_with_million(cost)} USD"
        if column.button(label, key=intervention.name, help=help_text, disabled=not can_afford(world, intervention)):
            loop.queue_intervention(intervention)
            for result in loop.apply_queued():
                if result.outcome == Outcome.APPLIED:
                    st.session_state.messages.append(f"Day {world.day}: {intervention.name} funded in {selected.name}")
            st.rerun()

# --- Tabs ---
tab1, tab2, tab3 = st.tabs(["📊 World", "🔎 Region", "📜 Log"])

with tab1:
    stats = world_statistics(world)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Population", f"{stats['total_population'] / 1e9:.2f}B")
    c2.metric("Happiness (avg)", f"{stats['average_happiness']:.2f}")
    c3.metric("Happiness (median)", f"{stats['median_happiness']:.2f}")
    c4.metric("CO2", f"{stats['co2ppm']:.1f} ppm")

    df = pd.DataFrame(st.session_state.history)
    metric = st.selectbox("Indicator", ["happiness", "population", "conflict", "finance", "education", "tech"])
    fig = px.line(df, x="day", y=metric, color="region", title=f"{metric.title()} by Region")
    st.plotly_chart(fig, use_container_width=True)

with tab2:
    if selected is None:
        st.write("No region selected.")
    else:
        summary = region_summary(selected)
        st.table(pd.DataFrame(list(summary.items()), columns=["Indicator", "Value"]))

with tab3:
    if st.session_state.messages:
        for message in reversed(st.session_state.messages):
            st.success(message)
    else:
        st.write("No interventions funded yet.")
