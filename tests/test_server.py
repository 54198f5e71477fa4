import pytest

from lp_optimizer.schemas import Constraint, LPModel, SolveOptions, Variable
from lp_optimizer.server import check_strong_duality, sensitivity_analysis, solve_lp, solve_mip


def make_production_lp() -> LPModel:
    return LPModel(
        name="production",
        sense="max",
        variables=[
            Variable(name="x1", coefficient=2.0),
            Variable(name="x2", coefficient=3.0),
        ],
        constraints=[
            Constraint(name="capacity", coefficients=[1.0, 1.0], cmp="<=", rhs=4.0),
            Constraint(name="x1_limit", coefficients=[1.0, 0.0], cmp="<=", rhs=2.0),
        ],
    )


def test_solve_lp_tool_returns_plain_dict():
    payload = solve_lp(make_production_lp())

    assert payload["status"] == "optimal"
    assert payload["objective_value"] == pytest.approx(12.0)
    assert payload["artifacts"]["basis_inverse"] == [[1.0, 0.0], [0.0, 1.0]]


def test_solve_lp_tool_accepts_option_aliases():
    options = SolveOptions.model_validate({"MaxIterations": 0, "BlandsRule": True, "Verbose": True})
    payload = solve_lp(make_production_lp(), options)

    assert payload["status"] == "max_iterations_reached"


def test_solve_mip_tool():
    model = make_production_lp()
    for var in model.variables:
        var.type = "integer"
    payload = solve_mip(model)

    assert payload["status"] == "optimal"
    assert payload["objective_value"] == pytest.approx(12.0)


def test_sensitivity_analysis_tool():
    payload = sensitivity_analysis(make_production_lp())

    assert payload["shadow_prices"]["capacity"] == pytest.approx(3.0)
    assert payload["duality"]["strong_duality"] is True


def test_sensitivity_analysis_tool_reports_failed_solve():
    model = LPModel(
        name="unbounded",
        sense="max",
        variables=[Variable(name="x", coefficient=1.0)],
    )
    payload = sensitivity_analysis(model)

    assert payload["status"] == "unbounded"


def test_check_strong_duality_tool():
    payload = check_strong_duality(make_production_lp())

    assert payload["method"] == "explicit_dual"
    assert payload["strong_duality"] is True
