import numpy as np
import pytest
from scipy.optimize import linprog

from lp_optimizer.analysis.duality import check_duality
from lp_optimizer.lp.simplex import simplex_solve
from lp_optimizer.lp.standard_form import canonicalize
from lp_optimizer.schemas import LPModel, SolveOptions
from scripts.generate_instances import generate_mixed_lp, generate_random_lp


def reference_objective(model: LPModel) -> float:
    sign = -1.0 if model.sense == "max" else 1.0
    c = sign * np.array(model.objective_vector())
    A_ub, b_ub, A_eq, b_eq = [], [], [], []
    for cons in model.constraints:
        if cons.cmp == "<=":
            A_ub.append(cons.coefficients)
            b_ub.append(cons.rhs)
        elif cons.cmp == ">=":
            A_ub.append([-a for a in cons.coefficients])
            b_ub.append(-cons.rhs)
        else:
            A_eq.append(cons.coefficients)
            b_eq.append(cons.rhs)
    result = linprog(
        c,
        A_ub=A_ub or None,
        b_ub=b_ub or None,
        A_eq=A_eq or None,
        b_eq=b_eq or None,
        bounds=[(var.lb, var.ub) for var in model.variables],
        method="highs",
    )
    assert result.status == 0, result.message
    return sign * result.fun


def check_alternate_flag(model: LPModel, solution, tol: float) -> None:
    art = solution.artifacts
    excluded = set(art.basis) | set(canonicalize(model).artificial_indices)
    near_zero = any(abs(r) < tol for j, r in enumerate(art.reduced_costs) if j not in excluded)

    assert art.alternate_optima == near_zero
    assert (solution.status == "alternative_optimal") == art.alternate_optima


@pytest.mark.parametrize("seed", range(8))
def test_random_standard_form_matches_reference(seed):
    model = generate_random_lp(5, 4, seed)
    solution = simplex_solve(model, SolveOptions())

    assert solution.is_optimal
    assert solution.objective_value == pytest.approx(reference_objective(model), rel=1e-7, abs=1e-7)
    assert model.is_feasible(solution.ordered_values(), tol=1e-6)
    check_alternate_flag(model, solution, SolveOptions().tolerance)

    report = check_duality(model, solution)
    assert report.method == "explicit_dual"
    assert report.strong_duality


@pytest.mark.parametrize("seed", range(8))
def test_random_mixed_models_match_reference(seed):
    model = generate_mixed_lp(6, 4, seed)
    solution = simplex_solve(model, SolveOptions())

    assert solution.is_optimal, solution.message
    assert solution.objective_value == pytest.approx(reference_objective(model), rel=1e-7, abs=1e-7)
    assert model.is_feasible(solution.ordered_values(), tol=1e-6)
    for var, value in zip(model.variables, solution.ordered_values()):
        assert var.lb is None or value >= var.lb - 1e-6
        assert var.ub is None or value <= var.ub + 1e-6
    check_alternate_flag(model, solution, SolveOptions().tolerance)

    report = check_duality(model, solution)
    assert report.method == "dual_vector"
    assert report.gap <= 1e-6


@pytest.mark.parametrize("seed", range(4))
def test_blands_rule_agrees_on_random_models(seed):
    model = generate_mixed_lp(6, 4, seed)
    dantzig = simplex_solve(model, SolveOptions())
    bland = simplex_solve(model, SolveOptions(BlandsRule=True))

    assert bland.is_optimal
    assert bland.objective_value == pytest.approx(dantzig.objective_value, rel=1e-7, abs=1e-7)
