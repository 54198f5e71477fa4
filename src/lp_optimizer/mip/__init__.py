"""Mixed-integer programming on top of the revised simplex engine."""

from .branch_and_bound import solve_mip_branch_and_bound

__all__ = ["solve_mip_branch_and_bound"]
