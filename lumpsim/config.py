from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import math

from .errors import ParameterError


class IntegrationMethod(Enum):
    """Discretization used to build the companion models of C and L."""
    BACKWARD_EULER = "be"
    TRAPEZOIDAL = "trap"


@dataclass(frozen=True)
class SimulationConfig:
    """
    Settings shared by every element of one simulation.

    Attributes:
        dt: Fixed time step in seconds (must be > 0). Changing it between
            steps is not supported.
        ground_index: Index of the reference node (always 0).
        method: Companion-model discretization (default: backward Euler).
        history_limit: None keeps every sample; a positive integer keeps only
            the most recent ``history_limit`` samples per node/element.
    """
    dt: float
    ground_index: int = 0
    method: IntegrationMethod = IntegrationMethod.BACKWARD_EULER
    history_limit: int | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.dt) or self.dt <= 0:
            raise ParameterError(f"Time step must be a positive finite number, got {self.dt!r}.")
        if self.ground_index != 0:
            raise ParameterError("The ground node must have index 0.")
        if not isinstance(self.method, IntegrationMethod):
            raise ParameterError(f"Unknown integration method {self.method!r}.")
        # the previous sample is read by the companion models, so keep at least two
        if self.history_limit is not None and self.history_limit < 2:
            raise ParameterError("history_limit must be None or an integer >= 2.")


@dataclass(frozen=True)
class SolverConfig:
    """
    Configuration of the dense linear solver.

    Attributes:
        max_condition: Systems whose 2-norm condition number exceeds this
            value are reported as ill-conditioned (default: 1e14).
        check_condition: Disable to skip the condition estimate on large systems.
    """
    max_condition: float = 1e14
    check_condition: bool = True

    def __post_init__(self) -> None:
        if not self.max_condition > 1.0:
            raise ParameterError("max_condition must be greater than 1.")
