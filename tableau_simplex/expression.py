"""
Linear expression parser.

Turns a space-separated expression such as "3x1 - x2 + - 2.5x3" into ordered
(coefficient, variable) terms.
- Sign tokens are standalone "+" or "-"; consecutive signs multiply.
- A term is an optional magnitude glued to a variable name ("3x1", "x2").
- A term without magnitude has coefficient 1.
- Duplicated names are kept as separate terms; use merge_terms to combine them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List

from tableau_simplex.errors import ParseError

_TERM_RE = re.compile(r"(\d+(?:\.\d+)?)?([A-Za-z_]\w*)")


@dataclass(frozen=True)
class Term:
    coefficient: float
    variable: str


def parse(expression: str) -> List[Term]:
    tokens = expression.split()
    if not tokens:
        raise ParseError("empty expression")

    terms: List[Term] = []
    sign = 1
    expect_term = True  # a term is allowed right now (start, or after a sign)
    pending_sign = False
    for tok in tokens:
        if tok == "-":
            sign = -sign
            expect_term = True
            pending_sign = True
            continue
        if tok == "+":
            expect_term = True
            pending_sign = True
            continue

        m = _TERM_RE.fullmatch(tok)
        if not m:
            raise ParseError(f"malformed term {tok!r} in {expression!r}")
        if not expect_term:
            raise ParseError(f"missing sign before {tok!r} in {expression!r}")
        magnitude, name = m.groups()
        coeff = float(magnitude) if magnitude is not None else 1.0
        terms.append(Term(sign * coeff, name))
        sign = 1
        expect_term = False
        pending_sign = False

    if pending_sign:
        raise ParseError(f"dangling sign at end of {expression!r}")
    return terms


def merge_terms(terms: Iterable[Term]) -> Dict[str, float]:
    """Sum coefficients by variable name, keeping first-seen order."""
    merged: Dict[str, float] = {}
    for t in terms:
        merged[t.variable] = merged.get(t.variable, 0.0) + t.coefficient
    return merged
