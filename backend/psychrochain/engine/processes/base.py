"""
Abstract base class for process solvers.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from psychrochain.models.constants import PsychrometricConstants
from psychrochain.models.process import Process, ProcessOutcome
from psychrochain.models.state_point import StatePoint


class ProcessContext(BaseModel):
    """Everything a solver may read: the process, its neighbourhood and physics."""

    process: Process
    points: dict[str, StatePoint]
    constants: PsychrometricConstants
    pressure: float
    to_template: StatePoint


class ProcessSolver(ABC):
    """Base class for all process solvers."""

    @abstractmethod
    def solve(self, ctx: ProcessContext) -> ProcessOutcome:
        """Solve the process and return the produced state and results."""
        ...
