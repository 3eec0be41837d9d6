from __future__ import annotations
from abc import abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Tuple
import math

from ..config import IntegrationMethod, SimulationConfig
from ..errors import ParameterError
from ..history import History
from .base import Element, ElementKind


def _require_positive(value: float, what: str, name: str) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ParameterError(f"{what} of '{name}' must be positive and finite, got {value!r}.")


def _require_finite(value: float, what: str, name: str) -> None:
    if not math.isfinite(value):
        raise ParameterError(f"{what} of '{name}' must be finite, got {value!r}.")


@dataclass
class Resistor(Element):
    name: str
    node_a: int
    node_b: int
    resistance: float
    kind: ClassVar[ElementKind] = ElementKind.RESISTOR

    def __post_init__(self) -> None:
        Element.__init__(self, self.name, self.node_a, self.node_b)
        _require_positive(self.resistance, "Resistance", self.name)

    @property
    def conductance(self) -> float:
        return 1.0 / self.resistance

    def current(self, t: int = -1) -> float:
        """Ohm's law on the solved terminal voltages."""
        return self.voltage(t) / self.resistance

    def describe(self) -> str:
        return f"R = {self.resistance:.6g} Ohm"


class StorageDevice(Element):
    """
    Energy-storing element replaced, at every step, by a companion model:
    a conductance g_eq in parallel with a current source i_eq (a -> b), both
    computed from the state solved at the previous step.

    Storage devices keep their own current history because the companion
    models need the previous current.
    """

    def __init__(self, name: str, node_a: int, node_b: int, initial_current: float = 0.0) -> None:
        Element.__init__(self, name, node_a, node_b)
        self._initial_current = float(initial_current)
        self.currents = History(self._initial_current)

    def reset_history(self, maxlen: int | None = None) -> None:
        self.currents = History(self._initial_current, maxlen=maxlen)

    def current(self, t: int = -1) -> float:
        return self.currents.at(t)

    @abstractmethod
    def conductance(self, dt: float, method: IntegrationMethod = IntegrationMethod.BACKWARD_EULER) -> float:
        """Companion conductance g_eq for the given time step and method."""

    @abstractmethod
    def companion(self, step: int, config: SimulationConfig) -> Tuple[float, float]:
        """
        Companion model (g_eq, i_eq) for the step following ``step``.

        The element current at the new step is g_eq * v_new + i_eq.
        """

    @staticmethod
    def method_for(step: int, config: SimulationConfig) -> IntegrationMethod:
        """
        Discretization used for the step following ``step``.

        The trapezoidal rule needs a consistent previous current, which is
        not known before the first step, so the first step is always
        backward Euler.
        """
        if step == 0:
            return IntegrationMethod.BACKWARD_EULER
        return config.method

    def advance(self, v_new: float, step: int, config: SimulationConfig) -> float:
        """Record and return the current for the step following ``step``."""
        g_eq, i_eq = self.companion(step, config)
        i_new = g_eq * v_new + i_eq
        self.currents.append(i_new)
        return i_new


@dataclass
class Capacitor(StorageDevice):
    name: str
    node_a: int
    node_b: int
    capacitance: float
    initial_voltage: float = 0.0
    kind: ClassVar[ElementKind] = ElementKind.CAPACITOR

    def __post_init__(self) -> None:
        _require_positive(self.capacitance, "Capacitance", self.name)
        _require_finite(self.initial_voltage, "Initial voltage", self.name)
        StorageDevice.__init__(self, self.name, self.node_a, self.node_b, initial_current=0.0)

    def voltage(self, t: int = -1) -> float:
        # sample 0 is the capacitor's own initial condition, not the node difference
        idx = self.currents.last_index if t == -1 else t
        if idx == 0 and self.currents.first_index == 0:
            return self.initial_voltage
        return super().voltage(t)

    def conductance(self, dt: float, method: IntegrationMethod = IntegrationMethod.BACKWARD_EULER) -> float:
        if method is IntegrationMethod.TRAPEZOIDAL:
            return 2.0 * self.capacitance / dt
        return self.capacitance / dt

    def companion(self, step: int, config: SimulationConfig) -> Tuple[float, float]:
        method = self.method_for(step, config)
        g_eq = self.conductance(config.dt, method)
        v_prev = self.voltage(step)
        if method is IntegrationMethod.TRAPEZOIDAL:
            return g_eq, -(g_eq * v_prev + self.currents.at(step))
        return g_eq, -g_eq * v_prev

    def describe(self) -> str:
        return f"C = {self.capacitance:.6g} F"


@dataclass
class Inductor(StorageDevice):
    name: str
    node_a: int
    node_b: int
    inductance: float
    initial_current: float = 0.0
    kind: ClassVar[ElementKind] = ElementKind.INDUCTOR

    def __post_init__(self) -> None:
        _require_positive(self.inductance, "Inductance", self.name)
        _require_finite(self.initial_current, "Initial current", self.name)
        StorageDevice.__init__(self, self.name, self.node_a, self.node_b,
                               initial_current=self.initial_current)

    def conductance(self, dt: float, method: IntegrationMethod = IntegrationMethod.BACKWARD_EULER) -> float:
        if method is IntegrationMethod.TRAPEZOIDAL:
            return dt / (2.0 * self.inductance)
        return dt / self.inductance

    def companion(self, step: int, config: SimulationConfig) -> Tuple[float, float]:
        method = self.method_for(step, config)
        g_eq = self.conductance(config.dt, method)
        i_prev = self.currents.at(step)
        if method is IntegrationMethod.TRAPEZOIDAL:
            return g_eq, i_prev + g_eq * self.voltage(step)
        return g_eq, i_prev

    def describe(self) -> str:
        return f"L = {self.inductance:.6g} H"
