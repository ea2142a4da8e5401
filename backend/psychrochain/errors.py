"""
Typed error kinds raised by the psychrometric engine.

All errors derive from ValueError so the API layer can map them to HTTP 422
the same way it handles any other invalid input.
"""


class PsychroError(ValueError):
    """Base class for every engine error."""

    kind = "PsychroError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class OutOfPhysicalRange(PsychroError):
    """An input or computed value violates a physical bound."""

    kind = "OutOfPhysicalRange"


class AmbiguousInput(PsychroError):
    """A state point does not carry exactly one supported input pair."""

    kind = "AmbiguousInput"


class ConvergenceFailure(PsychroError):
    """An iterative solve exhausted max_iterations without converging."""

    kind = "ConvergenceFailure"

    def __init__(self, message: str, iterations: int = 0):
        super().__init__(message)
        self.iterations = iterations


class UpstreamUnresolved(PsychroError):
    """A process was applied to a state point that is not fully resolved."""

    kind = "UpstreamUnresolved"

    def __init__(self, message: str, point_id: str = ""):
        super().__init__(message)
        self.point_id = point_id


class InvalidProcessParameters(PsychroError):
    """A required process parameter is missing or non-physical."""

    kind = "InvalidProcessParameters"

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field
