from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Tuple
import numpy as np

from ..components.base import Element, ElementKind
from ..config import SimulationConfig
from ..errors import TopologyError
from ..network.topology import Topology

logger = logging.getLogger(__name__)

Array = np.ndarray


@dataclass
class StampData:
    """
    Shared view of the MNA system during stamping.

    Attributes:
        A: Coefficient matrix, shape (n+m, n+m).
        z: Right-hand side vector, length n+m.
        topology: Topology being assembled (maps node index -> row).
        config: Simulation settings (dt, integration method).
        step: Index of the last solved step; companion models read it.
        time: Simulated time of the step being assembled.
    """
    A: Array
    z: Array
    topology: Topology
    config: SimulationConfig
    step: int
    time: float

    def row(self, node_index: int) -> int | None:
        return self.topology.row(node_index)


def stamp_conductance(data: StampData, node_a: int, node_b: int, g: float) -> None:
    ia = data.row(node_a)
    ib = data.row(node_b)
    if ia is not None:
        data.A[ia, ia] += g
    if ib is not None:
        data.A[ib, ib] += g
    if ia is not None and ib is not None:
        data.A[ia, ib] -= g
        data.A[ib, ia] -= g


def stamp_current_source(data: StampData, node_a: int, node_b: int, current: float) -> None:
    """
    Positive current flows from node_a to node_b through the source.
    """
    ia = data.row(node_a)
    ib = data.row(node_b)
    if ia is not None:
        data.z[ia] -= current
    if ib is not None:
        data.z[ib] += current


def stamp_voltage_source(data: StampData, aux_idx: int, node_a: int, node_b: int, voltage: float) -> None:
    ia = data.row(node_a)
    ib = data.row(node_b)
    if ia is not None:
        data.A[ia, aux_idx] += 1.0
        data.A[aux_idx, ia] += 1.0
    if ib is not None:
        data.A[ib, aux_idx] -= 1.0
        data.A[aux_idx, ib] -= 1.0
    data.z[aux_idx] = voltage


def _stamp_resistor(data: StampData, element: Element) -> None:
    stamp_conductance(data, element.node_a, element.node_b, element.conductance)


def _stamp_storage(data: StampData, element: Element) -> None:
    g_eq, i_eq = element.companion(data.step, data.config)
    stamp_conductance(data, element.node_a, element.node_b, g_eq)
    stamp_current_source(data, element.node_a, element.node_b, i_eq)


def _stamp_current_source(data: StampData, element: Element) -> None:
    stamp_current_source(data, element.node_a, element.node_b, element.value(data.time))


def _stamp_voltage_source(data: StampData, element: Element) -> None:
    if element.aux_index is None:
        raise TopologyError(f"Voltage source '{element.name}' has no auxiliary unknown.")
    stamp_voltage_source(data, element.aux_index, element.node_a, element.node_b,
                         element.value(data.time))


Stamper = Callable[[StampData, Element], None]

STAMPERS: Dict[ElementKind, Stamper] = {
    ElementKind.RESISTOR: _stamp_resistor,
    ElementKind.CAPACITOR: _stamp_storage,
    ElementKind.INDUCTOR: _stamp_storage,
    ElementKind.CURRENT_SOURCE: _stamp_current_source,
    ElementKind.VOLTAGE_SOURCE: _stamp_voltage_source,
}

_unhandled = set(ElementKind) - set(STAMPERS)
if _unhandled:
    raise RuntimeError(f"No stamp defined for element kinds: {sorted(k.value for k in _unhandled)}")


def stamp_element(data: StampData, element: Element) -> None:
    """Add one element's contribution to (A, z), dispatching on its kind."""
    STAMPERS[element.kind](data, element)


class SystemAssembler:
    """
    Builds the per-step linear system A x = z from the topology.

    Ground rows/columns are never written: the ground unknown is removed
    before assembly. Every call returns freshly allocated arrays.
    """

    def __init__(self, topology: Topology, config: SimulationConfig) -> None:
        self.topology = topology.finalize()
        self.config = config

    @property
    def size(self) -> int:
        return self.topology.size

    def assemble(self, step: int, time: float) -> Tuple[Array, Array]:
        """
        Assemble the system for the step following ``step``.

        Args:
            step: Index of the last solved step (0 before the first step).
            time: Simulated time at which sources are evaluated.

        Returns:
            (A, z) with shape (n+m, n+m) and (n+m,).
        """
        size = self.size
        data = StampData(
            A=np.zeros((size, size), dtype=float),
            z=np.zeros(size, dtype=float),
            topology=self.topology,
            config=self.config,
            step=step,
            time=time,
        )
        for element in self.topology:
            stamp_element(data, element)
        logger.debug("Assembled %dx%d system at t=%g.", size, size, time)
        return data.A, data.z
