"""
Exceptions raised by the simulation engine.

Construction problems (topology, parameters) are fatal before the first step.
A singular system is fatal for the step that produced it; earlier results
remain valid. Out-of-range history queries are reported to the caller only.
"""
from __future__ import annotations

import numpy as np


class SimulationError(Exception):
    """Base class for every error raised by lumpsim."""


class TopologyError(SimulationError):
    """Malformed node/element references, degenerate elements or missing ground."""


class ParameterError(SimulationError, ValueError):
    """Invalid element or configuration parameter."""


class SingularSystemError(SimulationError, np.linalg.LinAlgError):
    """
    The assembled MNA matrix cannot be solved reliably.

    Attributes:
        step: Step number (1-based) whose system failed, if known.
        condition: Estimated condition number, if it was computed.
    """

    def __init__(self, message: str, step: int | None = None, condition: float | None = None) -> None:
        super().__init__(message)
        self.step = step
        self.condition = condition


class QueryRangeError(SimulationError, IndexError):
    """A history entry was requested that has not been computed (or was evicted)."""

    def __init__(self, index: int, first: int, last: int) -> None:
        if last < first:
            msg = f"History index {index} requested but the history is empty."
        else:
            msg = f"History index {index} is outside the available range [{first}, {last}]."
        super().__init__(msg)
        self.index = index
        self.first = first
        self.last = last
