from __future__ import annotations

"""
Display helpers for tableaux and results.
- Numbers render as integers or reduced fractions (float noise is rounded away).
- format_tableau/print_tableau show the Z row, constraint rows, RHS, BV and ratios.
- plot_feasible_region draws two-variable problems with matplotlib.
"""

import math
from fractions import Fraction
from itertools import combinations
from typing import List, Optional, Union

from tableau_simplex.standard_form import LinearProgram, Tableau

Num = Union[int, float, Fraction]


def F(x: Num) -> Fraction:
    """Convert a number to a Fraction.
    - Fraction -> as is
    - int -> exact
    - float -> best rational approx (limit large denominator)
    """
    if isinstance(x, Fraction):
        return x
    if isinstance(x, int):
        return Fraction(x)
    return Fraction.from_float(float(x)).limit_denominator(10**6)


def fmt_out(x: Num) -> str:
    """Pretty-print numbers as integers or reduced fractions."""
    if isinstance(x, float):
        if math.isnan(x) or math.isinf(x):
            return str(x)
        if abs(x) < 1e-12:
            x = 0.0
    fr = F(x)
    if fr == 0:
        return "0"
    if fr.denominator == 1:
        return str(fr.numerator)
    sign = '-' if fr.numerator * fr.denominator < 0 else ''
    return f"{sign}{abs(fr.numerator)}/{abs(fr.denominator)}"


def format_tableau(tab: Tableau, header: str = "", enter_j: Optional[int] = None, leave_i: Optional[int] = None,
                   eps: float = 1e-9) -> str:
    title = header or f"Iteration {tab.iterations}"
    headers = ["Z"] + tab.variables + ["RHS", "BV", "Ratio"]

    z_cells = ["Z"] + [fmt_out(v) for v in tab.objective_row[:-1]] + [fmt_out(tab.objective_value), "Z", ""]
    rows: List[List[str]] = []
    for i in range(tab.m):
        cells = [""]
        for j in range(tab.num_vars):
            s = fmt_out(tab.A[i][j])
            if i == leave_i and j == enter_j:
                s = f"[{s}]"
            cells.append(s)
        if enter_j is not None and tab.A[i][enter_j] > eps:
            ratio = fmt_out(tab.b[i] / tab.A[i][enter_j])
        else:
            ratio = ""
        cells.extend([fmt_out(tab.b[i]), tab.variables[tab.basic[i]], ratio])
        rows.append(cells)

    colw = max(6, max(len(s) for s in headers + z_cells + [c for r in rows for c in r]) + 2)
    lines = [title, " ".join(f"{h:>{colw}}" for h in headers), "-" * (len(headers) * (colw + 1))]
    lines.append(" ".join(f"{c:>{colw}}" for c in z_cells))
    for cells in rows:
        lines.append(" ".join(f"{c:>{colw}}" for c in cells))
    return "\n".join(lines)


def print_tableau(tab: Tableau, header: str = "", enter_j: Optional[int] = None, leave_i: Optional[int] = None,
                  eps: float = 1e-9):
    print("\n" + format_tableau(tab, header=header, enter_j=enter_j, leave_i=leave_i, eps=eps))


def plot_feasible_region(lp: LinearProgram, res=None):
    """Plot constraints and an iso-profit line for 2 decision variables.
    Returns a matplotlib Figure, or None when the problem is not 2-D or the
    feasible region is empty.
    """
    import matplotlib.pyplot as plt
    import numpy as np

    if len(lp.decision_variables) != 2:
        return None
    xname, yname = lp.decision_variables

    # every row is in "<=" form after normalization
    A = [[row.coefficients.get(xname, 0.0), row.coefficients.get(yname, 0.0)] for row in lp.constraints]
    b = [row.rhs for row in lp.constraints]

    def feasible(p):
        x, y = p
        ok = x >= -1e-9 and y >= -1e-9
        for (a1, a2), bi in zip(A, b):
            ok = ok and a1*x + a2*y <= bi + 1e-9
        return ok

    # extreme points: pairwise intersections of constraint lines and the axes
    lines = [(a1, a2, bi) for (a1, a2), bi in zip(A, b)] + [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0)]
    pts = []
    for (a1, a2, bi), (c1, c2, bj) in combinations(lines, 2):
        det = a1*c2 - a2*c1
        if abs(det) < 1e-12:
            continue
        p = ((bi*c2 - a2*bj) / det, (a1*bj - bi*c1) / det)
        if feasible(p) and not any(abs(p[0]-q[0]) < 1e-7 and abs(p[1]-q[1]) < 1e-7 for q in pts):
            pts.append(p)
    if not pts:
        return None

    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    xmax = max(xs)*1.2 + 1.0
    ymax = max(ys)*1.2 + 1.0
    grid_x = np.linspace(0.0, xmax, 400)

    fig, ax = plt.subplots(figsize=(6, 6))
    color_cycle = plt.rcParams.get('axes.prop_cycle', None)
    colors = color_cycle.by_key()['color'] if color_cycle else [f'C{i}' for i in range(10)]
    for i, row in enumerate(lp.constraints):
        a1, a2 = A[i]
        c = colors[i % len(colors)]
        if abs(a2) < 1e-12:
            if abs(a1) > 1e-12:
                ax.axvline(b[i]/a1, color=c, alpha=0.7, label=row.text)
        else:
            ax.plot(grid_x, (b[i] - a1*grid_x)/a2, color=c, alpha=0.7, label=row.text)

    X, Y = np.meshgrid(np.linspace(0.0, xmax, 200), np.linspace(0.0, ymax, 200))
    mask = np.ones_like(X, dtype=bool)
    for (a1, a2), bi in zip(A, b):
        mask &= a1*X + a2*Y <= bi + 1e-9
    ax.contourf(X, Y, mask, levels=[0.5, 1.5], colors=['#e8f7ff'], alpha=0.5)

    ax.scatter(xs, ys, s=25, color='#444444', alpha=0.9, label='BFS')

    if res is not None:
        xopt, yopt = res.values[xname], res.values[yname]
        c1, c2 = lp.c
        zmax = c1*xopt + c2*yopt
        if abs(c2) < 1e-12:
            if abs(c1) > 1e-12:
                ax.axvline(zmax / c1, color='red', linestyle='--', label='iso-profit')
        else:
            ax.plot(grid_x, (zmax - c1*grid_x)/c2, 'r--', label='iso-profit (through optimum)')
        ax.plot([xopt], [yopt], 'ro', label=f"optimal ({fmt_out(xopt)}, {fmt_out(yopt)})")
        ax.annotate(f"Z* = {fmt_out(res.objective_value)}", (xopt, yopt), textcoords="offset points", xytext=(8, 8))

    ax.set_xlim(0.0, xmax)
    ax.set_ylim(0.0, ymax)
    ax.set_xlabel(xname)
    ax.set_ylabel(yname)
    ax.set_title('Constraints, Feasible Region, Iso-profit')
    ax.legend(loc='best', fontsize=8)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    return fig
