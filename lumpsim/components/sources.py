from __future__ import annotations
from dataclasses import dataclass, field
from typing import ClassVar, Sequence

from ..history import History
from ..waveforms import Breakpoint, Constant, PiecewiseLinear, Waveform, as_waveform
from .base import Element, ElementKind, SourceType


class PowerSource(Element):
    """Independent source driven by a DC or piecewise-linear waveform."""
    waveform: Waveform

    @property
    def source_type(self) -> SourceType:
        return SourceType.PWL if isinstance(self.waveform, PiecewiseLinear) else SourceType.DC

    def value(self, time: float) -> float:
        return self.waveform.value(time)

    def describe(self) -> str:
        return f"[{self.source_type.value}]"


@dataclass
class VoltageSource(PowerSource):
    """
    Ideal voltage source, V(node_a) - V(node_b) = v(t).

    Adds one auxiliary unknown (its branch current) to the MNA system.
    The recorded current flows from node_a to node_b through the source.
    """
    name: str
    node_a: int
    node_b: int
    waveform: Waveform
    currents: History = field(init=False, repr=False, compare=False)
    kind: ClassVar[ElementKind] = ElementKind.VOLTAGE_SOURCE

    def __post_init__(self) -> None:
        self.waveform = as_waveform(self.waveform)
        Element.__init__(self, self.name, self.node_a, self.node_b)
        self.aux_index: int | None = None
        self.currents = History(0.0)

    def reset_history(self, maxlen: int | None = None) -> None:
        self.currents = History(0.0, maxlen=maxlen)

    def current(self, t: int = -1) -> float:
        return self.currents.at(t)

    def record(self, current: float) -> None:
        self.currents.append(current)

    @classmethod
    def dc(cls, name: str, node_a: int, node_b: int, voltage: float) -> VoltageSource:
        return cls(name, node_a, node_b, Constant(voltage))

    @classmethod
    def pwl(cls, name: str, node_a: int, node_b: int, points: Sequence[Breakpoint]) -> VoltageSource:
        return cls(name, node_a, node_b, PiecewiseLinear(tuple(points)))


@dataclass
class CurrentSource(PowerSource):
    """
    Ideal current source driving i(t) from node_a to node_b through the source.

    Only contributes to the right-hand side. The value used at each step is
    recorded so that historical queries do not need the time step.
    """
    name: str
    node_a: int
    node_b: int
    waveform: Waveform
    currents: History = field(init=False, repr=False, compare=False)
    kind: ClassVar[ElementKind] = ElementKind.CURRENT_SOURCE

    def __post_init__(self) -> None:
        self.waveform = as_waveform(self.waveform)
        Element.__init__(self, self.name, self.node_a, self.node_b)
        self.currents = History(self.value(0.0))

    def reset_history(self, maxlen: int | None = None) -> None:
        self.currents = History(self.value(0.0), maxlen=maxlen)

    def current(self, t: int = -1) -> float:
        return self.currents.at(t)

    def record(self, current: float) -> None:
        self.currents.append(current)

    @classmethod
    def dc(cls, name: str, node_a: int, node_b: int, current: float) -> CurrentSource:
        return cls(name, node_a, node_b, Constant(current))

    @classmethod
    def pwl(cls, name: str, node_a: int, node_b: int, points: Sequence[Breakpoint]) -> CurrentSource:
        return cls(name, node_a, node_b, PiecewiseLinear(tuple(points)))
