from typing import Dict, Optional, Sequence

import numpy as np
from pydantic import BaseModel

from .artifacts import BasisView, basis_view
from ..schemas import Cmp, LPModel, LPSolution

PROFIT_TOL = 1e-10
FEASIBILITY_TOL = 1e-10


class WhatIfResult(BaseModel):
    """Primal point and objective after a data change, holding the optimal basis fixed."""

    x: Dict[str, float]
    objective_value: float
    basis_still_feasible: bool
    basis_still_optimal: Optional[bool] = None


class NewActivityResult(BaseModel):
    reduced_cost: float
    profitable: bool


class NewConstraintResult(BaseModel):
    lhs: float
    slack: float
    already_satisfied: bool


def apply_rhs_change(model: LPModel, solution: LPSolution, constraint: str | int, delta: float) -> WhatIfResult:
    """Move one constraint's RHS by delta and re-evaluate x_B = B^-1 b' without pivoting."""

    view = basis_view(model, solution)
    canonical = view.canonical
    row = _row_index(view, constraint)

    b_new = canonical.b.copy()
    b_new[row] += canonical.row_signs[row] * delta
    xB = view.basic_solution(b_new)
    feasible = bool(np.all(xB >= -FEASIBILITY_TOL))

    x_canon = _expand(view, xB)
    return WhatIfResult(
        x=_original(model, view, x_canon),
        objective_value=float(canonical.c @ x_canon),
        basis_still_feasible=feasible,
        basis_still_optimal=feasible,
    )


def apply_cost_change(model: LPModel, solution: LPSolution, variable: str | int, delta: float) -> WhatIfResult:
    """Shift one variable's objective coefficient; x stays put, reduced costs tell whether it should."""

    view = basis_view(model, solution)
    canonical = view.canonical
    index = _variable_index(model, variable)

    c_new = canonical.c.copy()
    for column, sign in canonical.mapping.components[index]:
        c_new[column] += sign * delta

    xB = view.basic_solution()
    x_canon = _expand(view, xB)

    y = c_new[view.basis] @ view.B_inv
    reduced = c_new - y @ canonical.A
    nonbasic = view.nonbasic
    if view.maximize:
        optimal = bool(np.all(reduced[nonbasic] <= PROFIT_TOL))
    else:
        optimal = bool(np.all(reduced[nonbasic] >= -PROFIT_TOL))

    return WhatIfResult(
        x=_original(model, view, x_canon),
        objective_value=float(c_new @ x_canon),
        basis_still_feasible=True,
        basis_still_optimal=optimal,
    )


def evaluate_new_activity(
    model: LPModel, solution: LPSolution, column: Sequence[float], cost: float
) -> NewActivityResult:
    """
    Price a candidate variable against the current duals: r = cost - sum(pi_i * a_i).
    ``column`` lists its coefficient in each model constraint, in model order.
    """

    if len(column) != len(model.constraints):
        raise ValueError(f"Expected {len(model.constraints)} column coefficients, got {len(column)}.")
    view = basis_view(model, solution)
    canonical = view.canonical
    y = view.duals if view.duals is not None else view.computed_duals()

    priced = sum(
        canonical.row_signs[i] * y[i] * coef for i, coef in enumerate(column)
    )
    reduced_cost = float(cost - priced)
    if view.maximize:
        profitable = reduced_cost > PROFIT_TOL
    else:
        profitable = reduced_cost < -PROFIT_TOL
    return NewActivityResult(reduced_cost=reduced_cost, profitable=profitable)


def evaluate_new_constraint(
    model: LPModel,
    solution: LPSolution,
    coefficients: Sequence[float],
    rhs: float,
    cmp: Cmp = "<=",
) -> NewConstraintResult:
    """Check whether the current optimum already satisfies an extra row."""

    if solution.x is None:
        raise ValueError(f"Solution with status '{solution.status}' carries no variable values.")
    if len(coefficients) != len(model.variables):
        raise ValueError(f"Expected {len(model.variables)} coefficients, got {len(coefficients)}.")

    values = [solution.x[var.name] for var in model.variables]
    lhs = float(sum(a * v for a, v in zip(coefficients, values)))
    if cmp == "<=":
        slack = rhs - lhs
    elif cmp == ">=":
        slack = lhs - rhs
    else:
        slack = -abs(lhs - rhs)
    return NewConstraintResult(lhs=lhs, slack=slack, already_satisfied=slack >= -FEASIBILITY_TOL)


def _expand(view: BasisView, xB: np.ndarray) -> np.ndarray:
    x = np.zeros(view.canonical.column_count)
    x[view.basis] = np.maximum(xB, 0.0)
    return x


def _original(model: LPModel, view: BasisView, x_canon: np.ndarray) -> Dict[str, float]:
    values = view.canonical.mapping.original_values(x_canon)
    return {var.name: float(value) for var, value in zip(model.variables, values)}


def _row_index(view: BasisView, constraint: str | int) -> int:
    canonical = view.canonical
    if isinstance(constraint, bool):
        raise TypeError("Constraint must be a name or an integer index, not a bool.")
    if isinstance(constraint, int):
        if not 0 <= constraint < canonical.model_row_count:
            raise IndexError(f"Constraint index {constraint} out of range.")
        return constraint
    try:
        return canonical.row_names.index(constraint, 0, canonical.model_row_count)
    except ValueError:
        raise KeyError(f"Unknown constraint: {constraint}") from None


def _variable_index(model: LPModel, variable: str | int) -> int:
    if isinstance(variable, bool):
        raise TypeError("Variable must be a name or an integer index, not a bool.")
    if isinstance(variable, int):
        if not 0 <= variable < len(model.variables):
            raise IndexError(f"Variable index {variable} out of range.")
        return variable
    index = model.variable_index()
    if variable not in index:
        raise KeyError(f"Unknown variable: {variable}")
    return index[variable]
