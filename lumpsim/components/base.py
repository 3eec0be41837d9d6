from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import ClassVar, Tuple, TYPE_CHECKING
import weakref

from ..errors import TopologyError

if TYPE_CHECKING:
    from ..network.topology import Topology


class ElementKind(Enum):
    """Closed set of element kinds; the values are the netlist type letters."""
    RESISTOR = "R"
    CAPACITOR = "C"
    INDUCTOR = "L"
    VOLTAGE_SOURCE = "V"
    CURRENT_SOURCE = "I"


class SourceType(Enum):
    DC = "dc"
    PWL = "pwl"


class Element(ABC):
    """
    Two-terminal circuit element.

    Elements only store node indices. A finalized Topology registers itself
    with each of its elements through a weak reference, which is what lets
    the element answer voltage/current queries from the solved node
    histories without keeping the topology alive.

    Current convention: positive current flows from node_a to node_b
    through the element.
    """
    kind: ClassVar[ElementKind]

    def __init__(self, name: str, node_a: int, node_b: int) -> None:
        self.name = name
        self.node_a = int(node_a)
        self.node_b = int(node_b)
        self._owner: weakref.ReferenceType[Topology] | None = None
        if self.node_a == self.node_b:
            raise TopologyError(
                f"Element '{name}' connects node {self.node_a} to itself."
            )

    @property
    def terminals(self) -> Tuple[int, int]:
        return self.node_a, self.node_b

    @property
    def owner(self) -> Topology | None:
        """Topology this element is bound to, or None."""
        return None if self._owner is None else self._owner()

    @property
    def topology(self) -> Topology:
        topology = self.owner
        if topology is None:
            raise TopologyError(f"Element '{self.name}' is not part of a finalized topology.")
        return topology

    def check_bindable(self, topology: Topology) -> None:
        owner = self.owner
        if owner is not None and owner is not topology:
            raise TopologyError(f"Element '{self.name}' already belongs to another topology.")

    def bind(self, topology: Topology) -> None:
        self.check_bindable(topology)
        self._owner = weakref.ref(topology)

    def reset_history(self, maxlen: int | None = None) -> None:
        """Drop recorded samples before a new run. Stateless elements have none."""

    def voltage(self, t: int = -1) -> float:
        """Branch voltage V(node_a) - V(node_b) at step t (-1: latest)."""
        topo = self.topology
        return topo.node(self.node_a).voltage(t) - topo.node(self.node_b).voltage(t)

    @abstractmethod
    def current(self, t: int = -1) -> float:
        """Branch current at step t (-1: latest)."""

    def describe(self) -> str:
        return ""

    def summary(self, t: int = -1) -> str:
        label = f"{self.kind.value} {self.name} ({self.node_a} -> {self.node_b})"
        extra = self.describe()
        if extra:
            label = f"{label} {extra}"
        return f"{label}: V = {self.voltage(t):.6g} V, I = {self.current(t):.6g} A"

    def __str__(self) -> str:
        return self.summary()
