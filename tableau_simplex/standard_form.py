from __future__ import annotations

"""
Standard-form builder.

Parses an objective and a list of constraint strings into a LinearProgram, then
lays it out as the initial tableau:
- every ">=" row is negated into a "<=" row,
- one slack variable e<k> per constraint forms the starting basis,
- the objective row holds the negated objective coefficients plus a constant.

The matrix is allocated once the final column count is known.
"""

import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from tableau_simplex.errors import (
    InfeasibleInitialBasisError,
    MalformedConstraintError,
    UnknownVariableError,
)
from tableau_simplex.expression import merge_terms, parse

if TYPE_CHECKING:
    from tableau_simplex.pivot import EngineState

UNKNOWN_VARIABLE_MODES = ("reject", "widen", "ignore")

_SENSE_RE = re.compile(r"\s*(maximize|maximise|max|minimize|minimise|min)\b\s*:?", re.IGNORECASE)
_OPERATOR_RE = re.compile(r"<=|>=")
_NUMBER_RE = re.compile(r"[+-]?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?")


@dataclass
class Constraint:
    coefficients: Dict[str, float]  # already multiplied by the sign reversal
    operator: str                   # as written: "<=" or ">="
    rhs: float                      # already multiplied by the sign reversal
    text: str

    @property
    def reverse(self) -> int:
        return -1 if self.operator == ">=" else 1


@dataclass
class LinearProgram:
    sense: str                  # "max" | "min"
    decision_variables: List[str]
    c: List[float]              # maximization form
    constraints: List[Constraint]


@dataclass
class Tableau:
    A: List[List[float]]
    b: List[float]
    objective_row: List[float]  # -z as an affine expression: reduced costs + constant
    variables: List[str]
    basic: List[int]
    solution: List[float]
    iterations: int = 0
    state: Optional["EngineState"] = field(default=None)

    @property
    def m(self) -> int:
        return len(self.A)

    @property
    def num_vars(self) -> int:
        return len(self.variables)

    @property
    def basic_variables(self) -> List[str]:
        return [self.variables[j] for j in self.basic]

    @property
    def objective_value(self) -> float:
        return -self.objective_row[-1]


def parse_objective(objective: str):
    """Return (sense, merged coefficients) for "Maximize 3x1 + 5x2" style input."""
    sense = "max"
    body = objective
    m = _SENSE_RE.match(objective)
    if m:
        sense = "min" if m.group(1).lower().startswith("min") else "max"
        body = objective[m.end():]
    coeffs = merge_terms(parse(body))
    if sense == "min":
        coeffs = {name: -v for name, v in coeffs.items()}
    return sense, coeffs


def parse_constraint(text: str) -> Constraint:
    ops = _OPERATOR_RE.findall(text)
    if len(ops) != 1:
        raise MalformedConstraintError(f"constraint {text!r} needs exactly one '<=' or '>='")
    op = ops[0]
    lhs, rhs_text = text.split(op)
    rhs_text = rhs_text.strip()
    if not _NUMBER_RE.fullmatch(rhs_text):
        raise MalformedConstraintError(f"right-hand side {rhs_text!r} of {text!r} is not a number")
    rhs = float(rhs_text)
    if not math.isfinite(rhs):
        raise MalformedConstraintError(f"right-hand side {rhs_text!r} of {text!r} is not finite")

    reverse = -1 if op == ">=" else 1
    coeffs = {name: v * reverse for name, v in merge_terms(parse(lhs)).items()}
    return Constraint(coefficients=coeffs, operator=op, rhs=rhs * reverse, text=text)


def parse_problem(objective: str, constraints: Sequence[str], unknown_variables: str = "widen") -> LinearProgram:
    if unknown_variables not in UNKNOWN_VARIABLE_MODES:
        raise ValueError(f"unknown_variables must be one of {', '.join(UNKNOWN_VARIABLE_MODES)}")
    if not constraints:
        raise MalformedConstraintError("at least one constraint is required")

    sense, obj = parse_objective(objective)
    names = list(obj)
    c = [obj[n] for n in names]
    rows = [parse_constraint(t) for t in constraints]

    known = set(names)
    for row in rows:
        for name in row.coefficients:
            if name in known:
                continue
            if unknown_variables == "reject":
                raise UnknownVariableError(f"variable {name!r} in {row.text!r} does not appear in the objective")
            if unknown_variables == "widen":
                names.append(name)
                c.append(0.0)
                known.add(name)

    # slack columns are named e1..em after the decision variables
    slacks = {f"e{k + 1}" for k in range(len(rows))}
    clashes = [name for name in names if name in slacks]
    if clashes:
        raise MalformedConstraintError(
            f"variable name(s) {', '.join(clashes)} collide with slack variable names e1..e{len(rows)}"
        )

    return LinearProgram(sense=sense, decision_variables=names, c=c, constraints=rows)


def build_from_problem(lp: LinearProgram) -> Tableau:
    m, n = len(lp.constraints), len(lp.decision_variables)
    N = n + m
    variables = lp.decision_variables + [f"e{k + 1}" for k in range(m)]

    A = [[0.0] * N for _ in range(m)]
    b = [0.0] * m
    for i, row in enumerate(lp.constraints):
        if row.rhs < 0:
            raise InfeasibleInitialBasisError(
                f"constraint {i + 1} ({row.text!r}) has negative right-hand side {row.rhs:g} "
                "after normalization; slack variables cannot start feasible"
            )
        for j, name in enumerate(lp.decision_variables):
            A[i][j] = row.coefficients.get(name, 0.0)
        A[i][n + i] = 1.0
        b[i] = row.rhs

    objective_row = [-v for v in lp.c] + [0.0] * m + [0.0]
    # negating 0.0 leaves -0.0 behind, which prints oddly
    objective_row = [v + 0.0 for v in objective_row]
    basic = [n + i for i in range(m)]
    solution = [0.0] * n + b[:]

    return Tableau(
        A=A,
        b=b,
        objective_row=objective_row,
        variables=variables,
        basic=basic,
        solution=solution,
    )


def build(objective: str, constraints: Sequence[str], unknown_variables: str = "widen") -> Tableau:
    return build_from_problem(parse_problem(objective, constraints, unknown_variables))
