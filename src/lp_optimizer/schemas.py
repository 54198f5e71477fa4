from __future__ import annotations

from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

Sense = Literal["min", "max"]
Cmp = Literal["<=", ">=", "=="]
VariableType = Literal["continuous", "positive", "negative", "unrestricted", "integer", "binary"]
SolveStatus = Literal[
    "optimal",
    "alternative_optimal",
    "infeasible",
    "unbounded",
    "max_iterations_reached",
    "error",
]

INTEGER_TYPES = ("integer", "binary")
NONNEGATIVE_TYPES = ("continuous", "positive", "integer", "binary")


class Variable(BaseModel):
    name: Optional[str] = None
    coefficient: float = 0.0
    type: VariableType = "positive"
    lb: float | None = None
    ub: float | None = None

    @model_validator(mode="after")
    def _apply_type_bounds(self) -> "Variable":
        if self.type in NONNEGATIVE_TYPES and self.lb is None:
            self.lb = 0.0
        if self.type == "binary" and self.ub is None:
            self.ub = 1.0
        if self.type == "negative" and self.ub is None:
            self.ub = 0.0

        label = self.name or "variable"
        if self.lb is not None and self.ub is not None and self.lb > self.ub:
            raise ValueError(f"Variable {label} has inconsistent bounds (lb {self.lb} > ub {self.ub}).")
        if self.type == "binary" and (self.lb < 0.0 or self.ub > 1.0):
            raise ValueError(f"Binary variable {label} must have bounds within [0, 1].")
        if self.type in NONNEGATIVE_TYPES and self.lb < 0.0:
            raise ValueError(f"{self.type.capitalize()} variable {label} cannot have a negative lower bound.")
        if self.type == "negative" and self.ub > 0.0:
            raise ValueError(f"Negative variable {label} cannot have a positive upper bound.")
        return self

    @property
    def is_integer(self) -> bool:
        return self.type in INTEGER_TYPES


class Constraint(BaseModel):
    name: Optional[str] = None
    coefficients: List[float]
    cmp: Cmp
    rhs: float

    def evaluate(self, values: Sequence[float]) -> float:
        return float(sum(coef * value for coef, value in zip(self.coefficients, values)))

    def violation(self, values: Sequence[float], tol: float = 0.0) -> float:
        lhs = self.evaluate(values)
        if self.cmp == "<=":
            gap = lhs - self.rhs
        elif self.cmp == ">=":
            gap = self.rhs - lhs
        else:
            gap = abs(lhs - self.rhs)
        return max(0.0, gap - tol)

    def is_satisfied(self, values: Sequence[float], tol: float = 1e-9) -> bool:
        return self.violation(values, tol) == 0.0


class LPModel(BaseModel):
    name: str = "problem"
    sense: Sense
    variables: List[Variable]
    constraints: List[Constraint] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_structure(self) -> "LPModel":
        if not self.variables:
            raise ValueError("Model must have at least one variable.")
        for idx, var in enumerate(self.variables):
            if var.name is None:
                var.name = f"x{idx + 1}"
        for idx, cons in enumerate(self.constraints):
            if cons.name is None:
                cons.name = f"C{idx + 1}"

        errors = structural_errors(self)
        if errors:
            raise ValueError("Model validation failed: " + "; ".join(errors))
        return self

    def variable_index(self) -> Dict[str, int]:
        return {var.name: idx for idx, var in enumerate(self.variables)}

    def objective_vector(self) -> List[float]:
        return [var.coefficient for var in self.variables]

    def constraint_matrix(self) -> List[List[float]]:
        return [list(cons.coefficients) for cons in self.constraints]

    def objective_value(self, values: Sequence[float]) -> float:
        if len(values) != len(self.variables):
            raise ValueError(f"Expected {len(self.variables)} variable values, got {len(values)}.")
        return float(sum(var.coefficient * value for var, value in zip(self.variables, values)))

    def is_feasible(self, values: Sequence[float], tol: float = 1e-9) -> bool:
        return all(cons.is_satisfied(values, tol) for cons in self.constraints)

    @property
    def is_integer_program(self) -> bool:
        return any(var.is_integer for var in self.variables)


def structural_errors(model: LPModel) -> List[str]:
    """Collect dimension and naming problems; models can be mutated after validation."""

    errors: List[str] = []
    n = len(model.variables)
    for idx, cons in enumerate(model.constraints):
        if len(cons.coefficients) != n:
            errors.append(
                f"Constraint {cons.name or idx} has {len(cons.coefficients)} coefficients "
                f"but model has {n} variables"
            )

    seen: set[str] = set()
    for var in model.variables:
        if var.name in seen:
            errors.append(f"Duplicate variable name: {var.name}")
        seen.add(var.name)

    seen = set()
    for cons in model.constraints:
        if cons.name in seen:
            errors.append(f"Duplicate constraint name: {cons.name}")
        seen.add(cons.name)
    return errors


class SolveOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    max_iterations: int = Field(default=2000, alias="MaxIterations", ge=0)
    blands_rule: bool = Field(default=False, alias="BlandsRule")
    tolerance: float = Field(default=1e-10, alias="Tolerance", gt=0.0)
    return_duals: bool = True


class SimplexArtifacts(BaseModel):
    """Canonical-space state exported by an optimal revised simplex run."""

    basis: List[int]
    basis_inverse: List[List[float]]
    reduced_costs: List[float]
    duals: Optional[List[float]] = None
    alternate_optima: bool = False


class LPSolution(BaseModel):
    status: SolveStatus
    objective_value: Optional[float]
    x: Dict[str, float] | None
    reduced_costs: Dict[str, float] | None
    duals: Dict[str, float] | None
    iterations: int
    message: str = ""
    log: str = ""
    artifacts: Optional[SimplexArtifacts] = None

    @property
    def is_optimal(self) -> bool:
        return self.status in ("optimal", "alternative_optimal")

    def ordered_values(self) -> List[float]:
        if self.x is None:
            raise ValueError(f"Solution with status '{self.status}' carries no variable values.")
        return list(self.x.values())
