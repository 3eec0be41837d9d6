from __future__ import annotations
from dataclasses import dataclass, field
import math

from ..errors import ParameterError
from ..history import History

GROUND_INDEX = 0


@dataclass(eq=False)
class Node:
    """
    Electrical connection point.

    The index is the dense, 0-based offset used by the MNA system (ground is 0
    and is never solved for). The node keeps one voltage sample per step;
    sample 0 is the initial condition.

    Attributes:
        index: Unique, stable node index.
        name: External display name (defaults to the index).
        initial_voltage: Value stored as sample 0.
        voltages: Step-indexed voltage history, appended by the Stepper only.
    """
    index: int
    name: str = ""
    initial_voltage: float = 0.0
    voltages: History = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ParameterError(f"Node index must be non-negative, got {self.index}.")
        if not math.isfinite(self.initial_voltage):
            raise ParameterError(f"Initial voltage of node {self.index} must be finite.")
        if not self.name:
            self.name = "gnd" if self.index == GROUND_INDEX else str(self.index)
        if self.is_ground:
            self.initial_voltage = 0.0
        self.voltages = History(self.initial_voltage)

    @property
    def is_ground(self) -> bool:
        return self.index == GROUND_INDEX

    def reset_history(self, maxlen: int | None = None) -> None:
        self.voltages = History(self.initial_voltage, maxlen=maxlen)

    def voltage(self, t: int = -1) -> float:
        """Voltage at step t (-1: latest). Ground is 0 V at every step."""
        value = self.voltages.at(t)
        return 0.0 if self.is_ground else value

    def summary(self, t: int = -1) -> str:
        return f"node {self.name} (#{self.index}): V = {self.voltage(t):.6g} V"

    def __str__(self) -> str:
        return self.summary()
