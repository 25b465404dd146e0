import json

import pytest

from tableau_simplex.errors import (
    InfeasibleInitialBasisError,
    IterationLimitError,
    MalformedConstraintError,
    ParseError,
    UnboundedError,
    UnknownVariableError,
)
from tableau_simplex.expression import merge_terms, parse
from tableau_simplex.pivot import EPS
from tableau_simplex.simplex import main, solve

PROBLEMS = [
    ("Maximize 3x1 + 5x2", ["x1 <= 4", "2x2 <= 12", "3x1 + 2x2 <= 18"]),
    ("Maximize 40x1 + 30x2", ["x1 + x2 <= 12", "2x1 + x2 <= 16"]),
    ("Maximize 8x1 + 10x2 + 7x3", ["x1 + 3x2 + 2x3 <= 10", "- x1 - 5x2 - x3 >= -8"]),
    ("Maximize 2x1 + 3x2 + 4x3", ["3x1 + 2x2 + x3 <= 10", "2x1 + 5x2 + 3x3 <= 15", "x1 + x2 + x3 <= 6"]),
    ("Maximize x1 + x2", ["x1 + x2 <= 4", "x1 <= 0"]),
]


def holds(text, values, tol=1e-7):
    op = "<=" if "<=" in text else ">="
    lhs, rhs = text.split(op)
    total = sum(v * values[name] for name, v in merge_terms(parse(lhs)).items())
    if op == "<=":
        return total <= float(rhs) + tol
    return total >= float(rhs) - tol


def test_scenario_1():
    res = solve(*PROBLEMS[0])
    assert res.status == "optimal"
    assert res.values["x1"] == pytest.approx(2.0)
    assert res.values["x2"] == pytest.approx(6.0)
    assert res.objective_value == pytest.approx(36.0)


def test_scenario_2():
    res = solve(*PROBLEMS[1])
    assert res.values == pytest.approx({"x1": 4.0, "x2": 8.0})
    assert res.objective_value == pytest.approx(400.0)
    assert res.iterations == 2


def test_scenario_3_unbounded():
    with pytest.raises(UnboundedError):
        solve("Maximize x1", ["x1 - x2 <= 5"])


def test_unbounded_with_no_constraint_on_entering_column():
    with pytest.raises(UnboundedError):
        solve("Maximize x1 + x2", ["x1 <= 3"])


def test_scenario_4_parse_error():
    with pytest.raises(ParseError):
        solve("Maximize 3x1 +", ["x1 <= 4"])


@pytest.mark.parametrize("objective, constraints", PROBLEMS)
def test_solution_is_feasible(objective, constraints):
    res = solve(objective, constraints)
    assert all(v >= -EPS for v in res.assignment.values())
    for text in constraints:
        assert holds(text, res.values)


@pytest.mark.parametrize("objective, constraints", PROBLEMS)
def test_optimality_certificate_and_objective_consistency(objective, constraints):
    res = solve(objective, constraints)
    tab = res.tableau
    assert all(v >= -EPS for v in tab.objective_row[:-1])
    assert res.objective_value == pytest.approx(-tab.objective_row[-1], abs=1e-9)
    c = merge_terms(parse(objective.split(" ", 1)[1]))
    assert res.objective_value == pytest.approx(sum(v * res.values[n] for n, v in c.items()))


def test_three_variable_optimum():
    res = solve(*PROBLEMS[3])
    assert res.objective_value == pytest.approx(20.0)


def test_minimize_is_negated_around_the_engine():
    res = solve("Minimize - x1 - 2x2", ["x1 + x2 <= 4", "x2 <= 3"])
    assert res.details["sense"] == "min"
    assert res.values == pytest.approx({"x1": 1.0, "x2": 3.0})
    assert res.objective_value == pytest.approx(-7.0)
    assert res.tableau.objective_value == pytest.approx(7.0)


def test_alternate_optimum_is_reported():
    res = solve("Maximize x1 + x2", ["x1 + x2 <= 4"])
    assert res.objective_value == pytest.approx(4.0)
    assert res.details["alternate_optimal"] is True
    assert res.details["alt_zero_rc_vars"] == ["x2"]


def test_unique_optimum_has_no_alternate():
    res = solve(*PROBLEMS[0])
    assert res.details["alternate_optimal"] is False
    assert res.details["basic_variables"] == ["e1", "x2", "x1"]


def test_unknown_variable_modes():
    with pytest.raises(UnknownVariableError):
        solve("Maximize x1", ["x1 + y <= 5"], unknown_variables="reject")
    res = solve("Maximize x1", ["x1 + y <= 5"], unknown_variables="ignore")
    assert res.objective_value == pytest.approx(5.0)
    res = solve("Maximize x1", ["x1 + y <= 5"])
    assert res.values == pytest.approx({"x1": 5.0, "y": 0.0})


def test_errors_propagate():
    with pytest.raises(InfeasibleInitialBasisError):
        solve("Maximize x1", ["x1 >= 1"])
    with pytest.raises(MalformedConstraintError):
        solve("Maximize x1", ["x1 = 1"])
    with pytest.raises(IterationLimitError):
        solve(*PROBLEMS[0], max_iterations=1)


def test_each_solve_is_independent():
    first = solve(*PROBLEMS[0])
    second = solve(*PROBLEMS[0])
    assert first.tableau is not second.tableau
    assert first.tableau.A == second.tableau.A


def test_cli_flags(capsys):
    argv = ["--objective", "Maximize 3x1 + 5x2", "--constraint", "x1 <= 4",
            "--constraint", "2x2 <= 12", "--constraint", "3x1 + 2x2 <= 18", "--no-verbose"]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert "Status: optimal" in out
    assert "Optimal value: 36" in out
    assert "x1 = 2, x2 = 6" in out
    assert "Initial tableau" not in out


def test_cli_json_file(tmp_path, capsys):
    path = tmp_path / "lp.json"
    path.write_text(json.dumps({
        "objective": "Maximize 40x1 + 30x2",
        "constraints": ["x1 + x2 <= 12", "2x1 + x2 <= 16"],
        "tie_break": "lowest",
    }))
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert "Initial tableau" in out
    assert "Optimal value: 400" in out


def test_cli_reports_solver_errors(capsys):
    argv = ["--objective", "Maximize x1", "--constraint", "x1 - x2 <= 5", "--no-verbose"]
    assert main(argv) == 1
    out = capsys.readouterr().out
    assert "Status: unbounded" in out


def test_cli_requires_a_problem():
    with pytest.raises(SystemExit):
        main(["--objective", "Maximize x1"])


def test_decision_variable_named_like_slack_is_rejected():
    with pytest.raises(MalformedConstraintError):
        solve("Maximize e1", ["e1 <= 3"])
    res = solve("Maximize e2", ["e2 <= 3"])
    assert res.values == pytest.approx({"e2": 3.0})
    assert res.objective_value == pytest.approx(3.0)


@pytest.mark.parametrize("rhs", ["inf", "infinity", "nan"])
def test_non_finite_right_hand_side_is_malformed(rhs):
    with pytest.raises(MalformedConstraintError):
        solve("Maximize x1", [f"x1 <= {rhs}"])
