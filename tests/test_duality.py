import pytest

from lp_optimizer.analysis.duality import build_dual, check_duality, is_standard_form
from lp_optimizer.lp.simplex import simplex_solve
from lp_optimizer.schemas import Constraint, LPModel, SolveOptions, Variable


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


def make_diet_lp() -> LPModel:
    return LPModel(
        name="diet-toy",
        sense="min",
        variables=[Variable(name="x", coefficient=3.0), Variable(name="y", coefficient=2.0)],
        constraints=[
            Constraint(name="c1", coefficients=[1.0, 2.0], cmp=">=", rhs=8.0),
            Constraint(name="c2", coefficients=[3.0, 1.0], cmp=">=", rhs=6.0),
        ],
    )


def test_standard_form_detection():
    assert is_standard_form(make_production_lp())
    assert not is_standard_form(make_diet_lp())

    bounded = make_production_lp()
    bounded.variables[0].ub = 5.0
    assert not is_standard_form(bounded)


def test_build_dual_transposes_the_model():
    dual = build_dual(make_production_lp())

    assert dual.sense == "min"
    assert [var.name for var in dual.variables] == ["y_capacity", "y_x1_limit"]
    assert [var.coefficient for var in dual.variables] == [4.0, 2.0]
    assert [cons.name for cons in dual.constraints] == ["dual_x1", "dual_x2"]
    assert dual.constraints[0].coefficients == [1.0, 1.0]
    assert dual.constraints[1].coefficients == [1.0, 0.0]
    assert all(cons.cmp == ">=" for cons in dual.constraints)
    assert [cons.rhs for cons in dual.constraints] == [2.0, 3.0]


def test_build_dual_rejects_general_models():
    with pytest.raises(ValueError):
        build_dual(make_diet_lp())


def test_strong_duality_via_explicit_dual():
    model = make_production_lp()
    report = check_duality(model, simplex_solve(model, SolveOptions()))

    assert report.method == "explicit_dual"
    assert report.dual_status == "optimal"
    assert report.primal_objective == pytest.approx(12.0)
    assert report.dual_objective == pytest.approx(12.0)
    assert report.strong_duality is True
    assert report.dual_values["y_capacity"] == pytest.approx(3.0)
    assert report.dual_values["y_x1_limit"] == pytest.approx(0.0, abs=1e-9)


def test_strong_duality_via_dual_vector():
    model = make_diet_lp()
    report = check_duality(model, simplex_solve(model, SolveOptions()))

    assert report.method == "dual_vector"
    assert report.dual_objective == pytest.approx(9.6)
    assert report.gap == pytest.approx(0.0, abs=1e-6)
    assert report.strong_duality is True


def test_dual_vector_check_includes_bound_rows():
    model = LPModel(
        name="boxed",
        sense="max",
        variables=[Variable(name="x", coefficient=2.0, ub=3.0), Variable(name="y", coefficient=1.0)],
        constraints=[Constraint(name="c1", coefficients=[1.0, 1.0], cmp="<=", rhs=5.0)],
    )
    report = check_duality(model, simplex_solve(model, SolveOptions()))

    assert report.method == "dual_vector"
    assert report.primal_objective == pytest.approx(8.0)
    assert report.strong_duality is True
    assert set(report.dual_values) == {"c1", "bound_x_ub"}


def test_duality_unavailable_without_optimum():
    model = LPModel(
        name="unbounded",
        sense="max",
        variables=[Variable(name="x1", coefficient=1.0), Variable(name="x2")],
        constraints=[Constraint(name="c1", coefficients=[1.0, -1.0], cmp="<=", rhs=1.0)],
    )
    report = check_duality(model, simplex_solve(model, SolveOptions()))

    assert report.method == "unavailable"
    assert report.strong_duality is False
