import logging
from typing import Dict, Literal, Optional

import numpy as np
from pydantic import BaseModel

from .shadow_prices import dual_vector
from ..exceptions import MissingArtifactsError
from ..lp.simplex import simplex_solve
from ..lp.standard_form import canonicalize
from ..schemas import Constraint, LPModel, LPSolution, SolveOptions, SolveStatus, Variable

logger = logging.getLogger(__name__)

STRONG_DUALITY_TOL = 1e-6


class DualityReport(BaseModel):
    method: Literal["explicit_dual", "dual_vector", "unavailable"]
    primal_objective: Optional[float] = None
    dual_objective: Optional[float] = None
    gap: Optional[float] = None
    strong_duality: bool = False
    dual_status: Optional[SolveStatus] = None
    dual_values: Optional[Dict[str, float]] = None
    message: str = ""


def is_standard_form(model: LPModel) -> bool:
    """max c^T x s.t. A x <= b, x >= 0 with no other bounds."""

    if model.sense != "max" or not model.constraints:
        return False
    if any(cons.cmp != "<=" for cons in model.constraints):
        return False
    return all(
        var.type in ("positive", "continuous") and var.lb == 0.0 and var.ub is None for var in model.variables
    )


def build_dual(model: LPModel) -> LPModel:
    """min b^T y s.t. A^T y >= c, y >= 0 for a standard-form max model."""

    if not is_standard_form(model):
        raise ValueError("Explicit dual construction needs a max model with <= rows and x >= 0.")

    variables = [
        Variable(name=f"y_{cons.name}", coefficient=cons.rhs, type="positive") for cons in model.constraints
    ]
    constraints = [
        Constraint(
            name=f"dual_{var.name}",
            coefficients=[cons.coefficients[j] for cons in model.constraints],
            cmp=">=",
            rhs=var.coefficient,
        )
        for j, var in enumerate(model.variables)
    ]
    return LPModel(name=f"{model.name}_dual", sense="min", variables=variables, constraints=constraints)


def check_duality(model: LPModel, solution: LPSolution, opts: Optional[SolveOptions] = None) -> DualityReport:
    if not solution.is_optimal or solution.objective_value is None:
        return DualityReport(
            method="unavailable",
            message=f"Primal status is '{solution.status}'; weak duality holds but there is nothing to compare.",
        )

    primal_objective = float(solution.objective_value)

    if is_standard_form(model):
        dual = build_dual(model)
        dual_solution = simplex_solve(dual, opts)
        logger.info("Solved dual of %s: status=%s", model.name, dual_solution.status)
        if not dual_solution.is_optimal:
            return DualityReport(
                method="explicit_dual",
                primal_objective=primal_objective,
                dual_status=dual_solution.status,
                message=f"Dual model did not solve to optimality: {dual_solution.message}",
            )
        dual_objective = float(dual_solution.objective_value)
        gap = abs(primal_objective - dual_objective)
        return DualityReport(
            method="explicit_dual",
            primal_objective=primal_objective,
            dual_objective=dual_objective,
            gap=gap,
            strong_duality=gap <= STRONG_DUALITY_TOL,
            dual_status=dual_solution.status,
            dual_values=dual_solution.x,
            message="Dual model solved with the revised simplex engine.",
        )

    try:
        y = dual_vector(model, solution)
    except MissingArtifactsError as exc:
        return DualityReport(method="unavailable", primal_objective=primal_objective, message=str(exc))

    canonical = canonicalize(model)
    # bound rows carry their own prices, so b.y is taken over every canonical row
    dual_objective = float(np.dot(canonical.b, y)) if canonical.row_count else 0.0
    gap = abs(primal_objective - dual_objective)
    return DualityReport(
        method="dual_vector",
        primal_objective=primal_objective,
        dual_objective=dual_objective,
        gap=gap,
        strong_duality=gap <= STRONG_DUALITY_TOL,
        dual_values={canonical.row_names[i]: float(y[i]) for i in range(canonical.row_count)},
        message="Compared the primal objective against b.y from the exported dual vector.",
    )
