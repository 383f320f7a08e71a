# app.py
import random
import streamlit as st
import plotly.graph_objects as go

from engine import LayoutEngine
from layout_config import LayoutConfig
from logsetup import configure_logging

configure_logging()

st.set_page_config(page_title="Collection Graph (Web)", layout="wide")


def new_engine(seed: int) -> LayoutEngine:
    # No worker pool: a streamlit rerun may drop the engine without close()
    config = LayoutConfig.from_dict({"engine": {"workers": 0}})
    return LayoutEngine(config=config, rng=random.Random(seed))


# Session state
if 'engine' not in st.session_state:
    st.session_state.engine = new_engine(0)

engine: LayoutEngine = st.session_state.engine

# UI
col_btns, col_plot = st.columns([1, 4], gap="large")

with col_btns:
    st.markdown("### Controls")
    seed = st.number_input("Seed", min_value=0, value=0, step=1)
    n_collections = st.number_input("Collections", min_value=0, max_value=5000, value=100, step=10)
    n_members = st.number_input("Members", min_value=0, max_value=500, value=5, step=1)
    if st.button("Generate Random Graph"):
        engine = st.session_state.engine = new_engine(int(seed))
        engine.generate_random_graph(int(n_collections), int(n_members))
        if n_members == 0 and n_collections > 0:
            st.warning("No members: generated collections have nothing to link to.")
    st.divider()

    ticks = st.slider("Ticks per step", min_value=1, max_value=200, value=20)
    if st.button("Advance"):
        for _ in range(int(ticks)):
            engine.advance()
    if st.button("Reset"):
        engine.reset()
    st.divider()

    # Info
    stats = engine.store.get_stats()
    st.markdown(
        f"Collections: {stats['collections']}  \n"
        f"Members: {stats['members']}  \n"
        f"Edges: {stats['edges']}  \n"
        f"Ticks run: {engine.ticks}"
    )
    if not engine.store.validate_invariants(verbose=True):
        st.error("Graph store invariants broken; see the log.")

# --------- Build Plotly figure ----------
with col_plot:
    fig = go.Figure()
    store = engine.store
    arena = store.getEntities()

    # Draw edges as one trace, segments separated by None
    ex = []; ey = []
    for e in store.getEdges():
        c_id, m_id = e.key()
        p1 = arena[c_id].position
        p2 = arena[m_id].position
        ex += [p1.x, p2.x, None]
        ey += [p1.y, p2.y, None]
    fig.add_trace(go.Scatter(
        x=ex, y=ey,
        mode='lines',
        line=dict(color='rgba(255,0,0,0.2)', width=1),
        hoverinfo='skip',
        showlegend=False
    ))

    # Draw entities: collections as circles, members as squares
    for label, symbol, size, wanted in (("collections", "circle", 8, True), ("members", "square", 11, False)):
        xs = []; ys = []; txt = []
        for ent in arena:
            if ent.isCollection() != wanted:
                continue
            xs.append(ent.position.x); ys.append(ent.position.y)
            txt.append(f"{ent.getUrl()} (degree {ent.getDegree()})")
        fig.add_trace(go.Scatter(
            x=xs, y=ys, mode='markers', name=label,
            text=txt, hoverinfo='text',
            marker=dict(symbol=symbol, size=size, color='black'),
        ))

    # Screen coordinates: y grows downwards
    fig.update_yaxes(scaleanchor="x", scaleratio=1, autorange="reversed")
    fig.update_layout(
        margin=dict(l=20, r=20, t=10, b=10),
        xaxis=dict(visible=False), yaxis=dict(visible=False),
        dragmode='pan', height=700
    )
    st.plotly_chart(fig, use_container_width=True)
