import io
from contextlib import redirect_stdout

import streamlit as st

# Local solver
from tableau_simplex.display import fmt_out, plot_feasible_region
from tableau_simplex.errors import SimplexError
from tableau_simplex.pivot import EPS
from tableau_simplex.simplex import solve
from tableau_simplex.standard_form import UNKNOWN_VARIABLE_MODES

st.set_page_config(page_title="Simplex Visualizer", layout="wide")
st.title("Simplex (Tableau) — Solve & Visualize")

# Sidebar options
with st.sidebar:
    st.header("Options")
    unknown_variables = st.selectbox("Constraint variables missing from the objective", UNKNOWN_VARIABLE_MODES, index=UNKNOWN_VARIABLE_MODES.index("widen"))
    tie_break = st.selectbox("Pivot tie-break", ["lowest", "highest"], index=0)
    eps = st.number_input("Tolerance", value=EPS, format="%.1e")
    max_iterations = st.number_input("Iteration cap (0 = none)", min_value=0, value=0, step=1)
    show_graph = st.checkbox("Show graph (2 variables only)", value=True)

default_objective = "Maximize 3x1 + 5x2"
default_constraints = "x1 <= 4\n2x2 <= 12\n3x1 + 2x2 <= 18"

st.subheader("Model")
objective = st.text_input("Objective", default_objective)
constraints_text = st.text_area("Constraints (one per line)", default_constraints, height=200)

col_run, col_reset = st.columns([1, 1])
run = col_run.button("Solve")
if col_reset.button("Reset to template"):
    st.rerun()

if run:
    constraints = [line.strip() for line in constraints_text.splitlines() if line.strip()]

    # Capture solver verbose output
    buf = io.StringIO()
    try:
        with redirect_stdout(buf):
            res = solve(
                objective,
                constraints,
                eps=float(eps),
                max_iterations=int(max_iterations) or None,
                unknown_variables=unknown_variables,
                tie_break=tie_break,
                verbose=True,
            )
    except SimplexError as e:
        st.subheader("Iterations / Tableaux")
        st.code(buf.getvalue())
        st.error(f"{type(e).__name__}: {e}")
    else:
        # Single-column layout: Iterations -> Result -> Graph
        st.subheader("Iterations / Tableaux")
        st.code(buf.getvalue())
        st.subheader("Result")
        st.json({
            "status": res.status,
            "optimal_value": fmt_out(res.objective_value),
            "solution": {name: fmt_out(v) for name, v in res.values.items()},
            "basic_variables": res.details["basic_variables"],
            "iterations": res.iterations,
        })
        if res.details.get("alternate_optimal"):
            st.info("Infinite many optimal solutions along an edge (alternate optimal).")

        st.subheader("Graph")
        if show_graph and len(res.problem.decision_variables) == 2:
            fig = plot_feasible_region(res.problem, res)
            if fig is not None:
                st.pyplot(fig)
            else:
                st.info("No feasible region to plot or numerical issue.")
        else:
            st.info("Graph available only for 2 variables.")
