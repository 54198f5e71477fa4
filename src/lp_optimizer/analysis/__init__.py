"""Post-optimality analysis over revised simplex artifacts."""

from .artifacts import BasisView, basis_view
from .duality import DualityReport, build_dual, check_duality, is_standard_form
from .ranging import SensitivityRange, cost_ranges_basic, cost_ranges_nonbasic, rhs_ranges
from .report import SensitivityReport, sensitivity_report
from .shadow_prices import dual_vector, shadow_prices
from .what_if import (
    NewActivityResult,
    NewConstraintResult,
    WhatIfResult,
    apply_cost_change,
    apply_rhs_change,
    evaluate_new_activity,
    evaluate_new_constraint,
)

__all__ = [
    "BasisView",
    "DualityReport",
    "NewActivityResult",
    "NewConstraintResult",
    "SensitivityRange",
    "SensitivityReport",
    "WhatIfResult",
    "apply_cost_change",
    "apply_rhs_change",
    "basis_view",
    "build_dual",
    "check_duality",
    "cost_ranges_basic",
    "cost_ranges_nonbasic",
    "dual_vector",
    "evaluate_new_activity",
    "evaluate_new_constraint",
    "is_standard_form",
    "rhs_ranges",
    "shadow_prices",
]
