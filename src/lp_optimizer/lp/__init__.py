"""Canonical-form construction and the revised simplex engine."""

from .simplex import EngineResult, simplex_solve, solve_canonical
from .standard_form import AuxiliaryColumn, CanonicalForm, VariableMapping, canonicalize

__all__ = [
    "AuxiliaryColumn",
    "CanonicalForm",
    "EngineResult",
    "VariableMapping",
    "canonicalize",
    "simplex_solve",
    "solve_canonical",
]
