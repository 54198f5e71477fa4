import logging

from mcp.server.fastmcp import FastMCP

from .analysis.duality import check_duality
from .analysis.report import sensitivity_report
from .exceptions import MissingArtifactsError
from .lp.simplex import simplex_solve
from .mip.branch_and_bound import solve_mip_branch_and_bound
from .schemas import LPModel, SolveOptions

logger = logging.getLogger(__name__)

mcp = FastMCP("LP Optimizer")


@mcp.tool()
def solve_lp(model: LPModel, options: SolveOptions | None = None) -> dict:
    "Solve a linear program via two-phase revised simplex and return the solution dict."
    opts = options or SolveOptions()
    return simplex_solve(model, opts).model_dump()


@mcp.tool()
def solve_mip(model: LPModel, options: SolveOptions | None = None, max_nodes: int | None = None) -> dict:
    "Solve a mixed-integer program via depth-first branch and bound."
    opts = options or SolveOptions(return_duals=False)
    return solve_mip_branch_and_bound(model, opts, max_nodes=max_nodes).model_dump()


@mcp.tool()
def sensitivity_analysis(model: LPModel, options: SolveOptions | None = None) -> dict:
    "Solve, then report shadow prices, cost and RHS ranges, and a duality check."
    opts = options or SolveOptions()
    solution = simplex_solve(model, opts)
    if not solution.is_optimal:
        return {"status": solution.status, "message": solution.message}
    try:
        return sensitivity_report(model, solution, opts).model_dump()
    except MissingArtifactsError as exc:
        logger.warning("Sensitivity analysis unavailable for %s: %s", model.name, exc)
        return {"status": solution.status, "message": str(exc)}


@mcp.tool()
def check_strong_duality(model: LPModel, options: SolveOptions | None = None) -> dict:
    "Solve the primal and compare its objective against the dual objective."
    opts = options or SolveOptions()
    solution = simplex_solve(model, opts)
    return check_duality(model, solution, opts).model_dump()


if __name__ == "__main__":
    # Allow: `uv run mcp dev src/lp_optimizer/server.py` or pack as stdio/http via CLI
    mcp.run()
