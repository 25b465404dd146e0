from typing import Dict, Sequence, Tuple

from tableau_simplex.standard_form import Tableau


def extract_solution(tab: Tableau, decision_variables: Sequence[str], c: Sequence[float]) -> Tuple[Dict[str, float], float]:
    """Read the assignment off the tableau and evaluate the objective.

    Slack variables appear in the assignment but carry no objective weight.
    """
    assignment = {name: value for name, value in zip(tab.variables, tab.solution)}
    value = sum(ci * assignment[name] for ci, name in zip(c, decision_variables))
    return assignment, value
