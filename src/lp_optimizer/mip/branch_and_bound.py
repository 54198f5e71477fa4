import logging
import math
from typing import Dict, List, Literal, Optional, Tuple

from ..lp.simplex import simplex_solve
from ..schemas import LPModel, LPSolution, SolveOptions, Variable

logger = logging.getLogger(__name__)

INTEGRALITY_TOL = 1e-6
BOUND_EPS = 1e-9


def solve_mip_branch_and_bound(
    model: LPModel, opts: Optional[SolveOptions] = None, max_nodes: Optional[int] = None
) -> LPSolution:
    """
    Depth-first branch and bound over the revised simplex engine:
      - Relax integrality, solve the LP at each node
      - Prune infeasible nodes and nodes no better than the incumbent
      - Branch on the most fractional integer variable with x<=floor and x>=ceil
    Hitting the node cap reports ``max_iterations_reached`` with the incumbent, if any.
    """

    opts = opts or SolveOptions()
    if not model.is_integer_program:
        return simplex_solve(model, opts)

    node_opts = opts.model_copy(update={"return_duals": False})
    sense_factor = 1.0 if model.sense == "max" else -1.0
    if max_nodes is None:
        max_nodes = min(1024, max(64, len([v for v in model.variables if v.is_integer]) * 20))

    best_solution: Optional[LPSolution] = None
    best_value: Optional[float] = None
    total_iterations = 0
    nodes_explored = 0
    stack: List[Tuple[LPModel, int]] = [(model, 0)]

    while stack and nodes_explored < max_nodes:
        current_model, depth = stack.pop()
        lp_solution = simplex_solve(current_model, node_opts)
        total_iterations += lp_solution.iterations
        nodes_explored += 1
        logger.debug("Node %d (depth %d): %s %s", nodes_explored, depth, lp_solution.status, lp_solution.objective_value)

        if lp_solution.status == "infeasible":
            continue
        if lp_solution.status == "unbounded":
            return _empty(
                "unbounded", total_iterations, "LP relaxation unbounded; the integer program appears unbounded."
            )
        if not lp_solution.is_optimal or lp_solution.objective_value is None:
            continue

        current_value = lp_solution.objective_value
        if best_value is not None and sense_factor * current_value <= sense_factor * best_value + INTEGRALITY_TOL:
            continue

        fractional = _select_fractional_variable(current_model, lp_solution.x or {})
        if fractional is None:
            best_solution = lp_solution
            best_value = current_value
            continue

        var_name, value = fractional
        left_model = _tighten_bound(current_model, var_name, "ub", math.floor(value))
        right_model = _tighten_bound(current_model, var_name, "lb", math.ceil(value))

        if right_model is not None:
            stack.append((right_model, depth + 1))
        if left_model is not None:
            stack.append((left_model, depth + 1))

    exhausted = bool(stack)
    logger.info(
        "Branch and bound on %s: nodes=%d incumbent=%s exhausted=%s", model.name, nodes_explored, best_value, exhausted
    )

    if best_solution is None:
        if exhausted:
            return _empty(
                "max_iterations_reached",
                total_iterations,
                f"Reached node limit ({max_nodes}) before finding a feasible integer solution.",
            )
        return _empty("infeasible", total_iterations, "No feasible integer assignment found.")

    x = {name: _snap(value) for name, value in (best_solution.x or {}).items()}
    if exhausted:
        return LPSolution(
            status="max_iterations_reached",
            objective_value=best_solution.objective_value,
            x=x,
            reduced_costs=None,
            duals=None,
            iterations=total_iterations,
            message=f"Reached node limit ({max_nodes}); returning best incumbent after {nodes_explored} nodes.",
        )
    return LPSolution(
        status="optimal",
        objective_value=best_solution.objective_value,
        x=x,
        reduced_costs=None,
        duals=None,
        iterations=total_iterations,
        message=f"Explored nodes: {nodes_explored}",
    )


def _select_fractional_variable(model: LPModel, values: Dict[str, float]) -> Optional[Tuple[str, float]]:
    best_var: Optional[str] = None
    best_gap = 0.0
    best_value = 0.0
    for var in model.variables:
        if not var.is_integer:
            continue
        value = values.get(var.name)
        if value is None:
            continue
        gap = abs(value - round(value))
        if gap > INTEGRALITY_TOL and gap > best_gap + INTEGRALITY_TOL * 0.1:
            best_gap = gap
            best_var = var.name
            best_value = value
    if best_var is None:
        return None
    return best_var, best_value


def _tighten_bound(
    model: LPModel, var_name: str, bound_type: Literal["lb", "ub"], bound_value: float
) -> Optional[LPModel]:
    new_model = model.model_copy(deep=True)
    target: Optional[Variable] = None
    for var in new_model.variables:
        if var.name == var_name:
            target = var
            break
    if target is None:
        return None

    if bound_type == "ub":
        if target.ub is not None and target.ub <= bound_value + BOUND_EPS:
            return None
        target.ub = float(bound_value)
    else:
        if target.lb is not None and target.lb >= bound_value - BOUND_EPS:
            return None
        target.lb = float(bound_value)

    if target.lb is not None and target.ub is not None and target.lb > target.ub + BOUND_EPS:
        return None
    return new_model


def _snap(value: float) -> float:
    nearest = round(value)
    return float(nearest) if abs(value - nearest) <= INTEGRALITY_TOL else value


def _empty(status, iterations: int, message: str) -> LPSolution:
    return LPSolution(
        status=status,
        objective_value=None,
        x=None,
        reduced_costs=None,
        duals=None,
        iterations=iterations,
        message=message,
    )
