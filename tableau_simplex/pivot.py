"""Tableau pivot engine: entering/leaving selection and Gauss-Jordan pivots."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from tableau_simplex.display import print_tableau
from tableau_simplex.errors import IterationLimitError, UnboundedError
from tableau_simplex.standard_form import Tableau

EPS = 1e-9
TIE_BREAKS = ("lowest", "highest")


class EngineState(Enum):
    IMPROVING = "improving"
    OPTIMAL = "optimal"
    UNBOUNDED = "unbounded"


def _pick(candidates, best, eps, tie_break):
    # candidates: (value, index) pairs in ascending index order
    ties = [j for v, j in candidates if v <= best + eps]
    return ties[0] if tie_break == "lowest" else ties[-1]


def choose_entering(tab: Tableau, eps: float = EPS, tie_break: str = "lowest") -> Optional[int]:
    """Column with the most negative reduced cost, or None when optimal."""
    candidates = [(v, j) for j, v in enumerate(tab.objective_row[:-1]) if v < -eps]
    if not candidates:
        return None
    best = min(v for v, _ in candidates)
    return _pick(candidates, best, eps, tie_break)


def choose_leaving(tab: Tableau, enter_j: int, eps: float = EPS, tie_break: str = "lowest") -> Optional[int]:
    """Row winning the minimum ratio test, or None when the column is unbounded."""
    ratios = []
    for i in range(tab.m):
        aij = tab.A[i][enter_j]
        if aij > eps:
            ratio = tab.b[i] / aij
            if ratio >= -eps:
                ratios.append((ratio, i))
    if not ratios:
        return None
    best = min(r for r, _ in ratios)
    return _pick(ratios, best, eps, tie_break)


def pivot(tab: Tableau, row: int, col: int, eps: float = EPS) -> Tableau:
    piv = tab.A[row][col]
    if abs(piv) <= eps:
        raise ValueError(f"zero pivot at row {row}, column {col}")

    prow = [v / piv for v in tab.A[row]]
    prow[col] = 1.0
    tab.A[row] = prow
    tab.b[row] /= piv

    for i in range(tab.m):
        if i == row:
            continue
        coeff = tab.A[i][col]
        if coeff == 0.0:
            continue
        tab.A[i] = [a - coeff * p for a, p in zip(tab.A[i], prow)]
        tab.A[i][col] = 0.0
        tab.b[i] -= coeff * tab.b[row]

    # the objective row is -z in the non-basic variables, so substituting the
    # entering variable moves factor * b[row] into the constant
    coeff = tab.objective_row[col]
    if coeff != 0.0:
        for j in range(tab.num_vars):
            tab.objective_row[j] -= coeff * prow[j]
        tab.objective_row[col] = 0.0
        tab.objective_row[-1] += coeff * tab.b[row]

    tab.basic[row] = col
    tab.solution = [0.0] * tab.num_vars
    for i, j in enumerate(tab.basic):
        tab.solution[j] = tab.b[i]
    tab.iterations += 1
    return tab


def run(tab: Tableau, eps: float = EPS, tie_break: str = "lowest",
        max_iterations: Optional[int] = None, verbose: bool = False) -> Tableau:
    """Pivot until optimal. Mutates and returns the tableau.

    Raises UnboundedError when an improving column has no positive entry, and
    IterationLimitError once more than max_iterations pivots would be needed.
    """
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"tie_break must be one of {', '.join(TIE_BREAKS)}")
    if verbose:
        print_tableau(tab, header="Initial tableau", eps=eps)

    tab.state = EngineState.IMPROVING
    while tab.state is EngineState.IMPROVING:
        enter_j = choose_entering(tab, eps, tie_break)
        if enter_j is None:
            tab.state = EngineState.OPTIMAL
            if verbose:
                print_tableau(tab, header=f"Final tableau (Iteration {tab.iterations})", eps=eps)
            break

        leave_i = choose_leaving(tab, enter_j, eps, tie_break)
        if leave_i is None:
            tab.state = EngineState.UNBOUNDED
            if verbose:
                print_tableau(tab, header="Final tableau (unbounded)", enter_j=enter_j, eps=eps)
            raise UnboundedError(
                f"objective is unbounded: entering variable {tab.variables[enter_j]!r} "
                "has no positive coefficient in any constraint row"
            )

        if max_iterations is not None and tab.iterations >= max_iterations:
            raise IterationLimitError(f"no optimum after {tab.iterations} pivots")

        if verbose:
            print_tableau(tab, header=f"Iteration {tab.iterations + 1}", enter_j=enter_j, leave_i=leave_i, eps=eps)
        pivot(tab, leave_i, enter_j, eps)
    return tab
