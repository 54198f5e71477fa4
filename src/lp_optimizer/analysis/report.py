from typing import Dict, List, Optional

from pydantic import BaseModel

from .duality import DualityReport, check_duality
from .ranging import SensitivityRange, cost_ranges_basic, cost_ranges_nonbasic, rhs_ranges
from .shadow_prices import shadow_prices
from ..schemas import LPModel, LPSolution, SolveOptions


class SensitivityReport(BaseModel):
    status: str
    objective_value: Optional[float]
    shadow_prices: Dict[str, float]
    cost_ranges_basic: List[SensitivityRange]
    cost_ranges_nonbasic: List[SensitivityRange]
    rhs_ranges: List[SensitivityRange]
    duality: DualityReport
    alternate_optima: bool = False


def sensitivity_report(
    model: LPModel, solution: LPSolution, opts: Optional[SolveOptions] = None
) -> SensitivityReport:
    """Post-optimality summary for a solution that carries basis artifacts."""

    return SensitivityReport(
        status=solution.status,
        objective_value=solution.objective_value,
        shadow_prices=shadow_prices(model, solution),
        cost_ranges_basic=cost_ranges_basic(model, solution),
        cost_ranges_nonbasic=cost_ranges_nonbasic(model, solution),
        rhs_ranges=rhs_ranges(model, solution),
        duality=check_duality(model, solution, opts),
        alternate_optima=bool(solution.artifacts and solution.artifacts.alternate_optima),
    )
