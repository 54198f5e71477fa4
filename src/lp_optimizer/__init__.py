"""LP Optimizer: two-phase revised simplex with sensitivity and duality analysis."""

from .exceptions import InvalidModelError, MissingArtifactsError, SingularMatrixError
from .lp.simplex import simplex_solve
from .mip.branch_and_bound import solve_mip_branch_and_bound
from .schemas import Constraint, LPModel, LPSolution, SimplexArtifacts, SolveOptions, Variable

__all__ = [
    "Constraint",
    "InvalidModelError",
    "LPModel",
    "LPSolution",
    "MissingArtifactsError",
    "SimplexArtifacts",
    "SingularMatrixError",
    "SolveOptions",
    "Variable",
    "simplex_solve",
    "solve_mip_branch_and_bound",
]
