from __future__ import annotations

"""
Simplex (Tableau) solver for text-defined linear programs.
- Objective: "Maximize 3x1 + 5x2" (a "Minimize" objective is negated before pivoting).
- Constraints: "<expr> <= <number>" or "<expr> >= <number>", variables non-negative.
- Starting basis is always the slack variables; no artificial variables.
- Shows each tableau iteration when verbose.

Pipeline: parse_problem -> build_from_problem -> run -> extract_solution.

CLI takes a JSON file {"objective": str, "constraints": [str, ...]} or the
same data through --objective/--constraint flags.
"""

import argparse
import json
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from tableau_simplex.display import fmt_out, plot_feasible_region
from tableau_simplex.errors import SimplexError
from tableau_simplex.extract import extract_solution
from tableau_simplex.pivot import EPS, TIE_BREAKS, run
from tableau_simplex.standard_form import (
    UNKNOWN_VARIABLE_MODES,
    LinearProgram,
    Tableau,
    build_from_problem,
    parse_problem,
)


@dataclass
class SimplexResult:
    status: str  # optimal
    objective_value: float
    values: Dict[str, float]      # decision variables only
    assignment: Dict[str, float]  # decision and slack variables
    iterations: int
    tableau: Tableau
    problem: LinearProgram
    details: Dict[str, object] = field(default_factory=dict)


def alternate_optimal_vars(tab: Tableau, eps: float = EPS) -> List[str]:
    """Non-basic variables with zero reduced cost at the optimum."""
    basis_set = set(tab.basic)
    return [
        tab.variables[j]
        for j in range(tab.num_vars)
        if j not in basis_set and abs(tab.objective_row[j]) <= eps
    ]


def solve(objective: str, constraints: Sequence[str], eps: float = EPS, max_iterations: Optional[int] = None,
          unknown_variables: str = "widen", tie_break: str = "lowest", verbose: bool = False) -> SimplexResult:
    lp = parse_problem(objective, constraints, unknown_variables=unknown_variables)
    tab = build_from_problem(lp)
    run(tab, eps=eps, tie_break=tie_break, max_iterations=max_iterations, verbose=verbose)

    assignment, z = extract_solution(tab, lp.decision_variables, lp.c)
    if lp.sense == "min":
        z = -z
    alt_vars = alternate_optimal_vars(tab, eps)
    details = {
        "alternate_optimal": len(alt_vars) > 0,
        "alt_zero_rc_vars": alt_vars,
        "var_names": tab.variables[:],
        "basic_variables": tab.basic_variables,
        "sense": lp.sense,
    }
    return SimplexResult(
        status="optimal",
        objective_value=z,
        values={name: assignment[name] for name in lp.decision_variables},
        assignment=assignment,
        iterations=tab.iterations,
        tableau=tab,
        problem=lp,
        details=details,
    )


# CLI

_ERROR_STATUS = {
    "ParseError": "parse error",
    "MalformedConstraintError": "malformed constraint",
    "UnknownVariableError": "unknown variable",
    "InfeasibleInitialBasisError": "infeasible initial basis",
    "UnboundedError": "unbounded",
    "IterationLimitError": "iteration limit",
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Tableau Simplex for text-defined LPs (shows iterations)")
    p.add_argument("json", nargs="?", help="Path to JSON file with 'objective' and 'constraints'")
    p.add_argument("--objective", help='e.g. "Maximize 3x1 + 5x2"')
    p.add_argument("--constraint", action="append", default=None, help='e.g. "x1 <= 4" (repeatable)')
    p.add_argument("--eps", type=float, default=None, help=f"Numeric tolerance (default {EPS:g})")
    p.add_argument("--max-iterations", type=int, default=None, help="Stop after this many pivots")
    p.add_argument("--unknown-variables", choices=UNKNOWN_VARIABLE_MODES, default=None,
                   help="What to do with constraint variables missing from the objective")
    p.add_argument("--tie-break", choices=TIE_BREAKS, default=None, help="Which index wins pivot ties")
    p.add_argument("--no-verbose", action="store_true", help="Hide iteration printouts")
    p.add_argument("--graph", action="store_true", help="Plot constraints and iso-profit (2 variables only)")
    args = p.parse_args(argv)

    cfg: Dict[str, object] = {}
    if args.json:
        with open(args.json, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    # CLI flags override the JSON file
    for key in ("objective", "eps", "max_iterations", "unknown_variables", "tie_break"):
        if getattr(args, key) is not None:
            cfg[key] = getattr(args, key)
    if args.constraint:
        cfg["constraints"] = args.constraint
    if "objective" not in cfg or "constraints" not in cfg:
        p.error("an objective and at least one constraint are required (JSON file or flags)")

    try:
        res = solve(
            cfg["objective"],
            cfg["constraints"],
            eps=float(cfg.get("eps", EPS)),
            max_iterations=cfg.get("max_iterations"),
            unknown_variables=cfg.get("unknown_variables", "widen"),
            tie_break=cfg.get("tie_break", "lowest"),
            verbose=not args.no_verbose,
        )
    except SimplexError as e:
        print("\n=== Result ===")
        print("Status:", _ERROR_STATUS.get(type(e).__name__, "error"))
        print("Reason:", e)
        return 1

    print("\n=== Result ===")
    print("Status:", res.status)
    print("Optimal value:", fmt_out(res.objective_value))
    print("Solution:", ", ".join(f"{name} = {fmt_out(v)}" for name, v in res.values.items()))
    print("Basic variables:", res.details["basic_variables"])
    print("Iterations:", res.iterations)
    if res.details.get("alternate_optimal"):
        print("Note: Infinite many optimal solutions (alternate optimal).")
        print("Zero reduced-cost nonbasic vars:", res.details["alt_zero_rc_vars"])
    if args.graph:
        fig = plot_feasible_region(res.problem, res)
        if fig is None:
            print("Graph only supports 2 variables with a non-empty feasible region.")
        else:
            import matplotlib.pyplot as plt

            plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
