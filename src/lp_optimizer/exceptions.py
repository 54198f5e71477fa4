class InvalidModelError(ValueError):
    """Model or canonical form is structurally inconsistent."""


class SingularMatrixError(ArithmeticError):
    """Basis matrix has no usable pivot during inversion."""


class MissingArtifactsError(ValueError):
    """A solution does not carry the basis artifacts an analysis needs."""
