#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import List, Optional

from lp_optimizer.schemas import Constraint, LPModel, Sense, Variable


def generate_random_lp(
    num_vars: int, num_constraints: int, seed: Optional[int] = None, sense: Sense = "max"
) -> LPModel:
    """Positive-coefficient <= rows with positive RHS: always feasible and bounded."""

    rng = random.Random(seed)
    variables = [
        Variable(name=f"x{i}", coefficient=rng.uniform(1.0, 4.0), type="positive") for i in range(num_vars)
    ]
    constraints: List[Constraint] = []
    for j in range(num_constraints):
        constraints.append(
            Constraint(
                name=f"c{j}",
                coefficients=[rng.uniform(0.5, 5.0) for _ in range(num_vars)],
                cmp="<=",
                rhs=rng.uniform(num_vars * 2.0, num_vars * 6.0),
            )
        )
    return LPModel(name="random-lp", sense=sense, variables=variables, constraints=constraints)


def generate_mixed_lp(num_vars: int, num_constraints: int, seed: Optional[int] = None) -> LPModel:
    """
    Feasible min model mixing row types and variable types around a known point.
    Every variable is boxed so the problem stays bounded.
    """

    rng = random.Random(seed)
    types = ["positive", "unrestricted", "negative"]
    variables: List[Variable] = []
    point: List[float] = []
    for i in range(num_vars):
        kind = types[i % len(types)]
        if kind == "positive":
            value, lb, ub = rng.uniform(0.0, 4.0), None, 10.0
        elif kind == "unrestricted":
            value, lb, ub = rng.uniform(-4.0, 4.0), -10.0, 10.0
        else:
            value, lb, ub = rng.uniform(-4.0, 0.0), -10.0, None
        point.append(value)
        variables.append(
            Variable(name=f"x{i}", coefficient=rng.uniform(-3.0, 3.0), type=kind, lb=lb, ub=ub)
        )

    constraints: List[Constraint] = []
    for j in range(num_constraints):
        coefficients = [rng.uniform(-3.0, 3.0) for _ in range(num_vars)]
        lhs = sum(a * v for a, v in zip(coefficients, point))
        cmp = rng.choice(["<=", ">=", "=="])
        if cmp == "<=":
            rhs = lhs + rng.uniform(0.0, 3.0)
        elif cmp == ">=":
            rhs = lhs - rng.uniform(0.0, 3.0)
        else:
            rhs = lhs
        constraints.append(Constraint(name=f"c{j}", coefficients=coefficients, cmp=cmp, rhs=rhs))
    return LPModel(name="mixed-lp", sense="min", variables=variables, constraints=constraints)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random feasible LP instances.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of constraints")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--mixed", action="store_true", help="Mix row relations and variable types")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    generator = generate_mixed_lp if args.mixed else generate_random_lp
    instances = [
        generator(args.vars, args.constraints, (args.seed or 0) + idx)
        for idx in range(args.count)
    ]
    payload = [instance.model_dump() for instance in instances]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
