"""
Transient simulation of lumped linear circuits with Modified Nodal Analysis.

A Topology of nodes and two-terminal elements (R, C, L, independent DC/PWL
voltage and current sources) is advanced one fixed time step at a time by a
Stepper: assemble A x = z, solve, record node voltages and element currents.
Capacitors and inductors are replaced by backward-Euler or trapezoidal
companion models built from the previous step.
"""

import logging

from .config import IntegrationMethod, SimulationConfig, SolverConfig  # noqa: F401
from .errors import (  # noqa: F401
    SimulationError,
    TopologyError,
    ParameterError,
    SingularSystemError,
    QueryRangeError,
)
from .history import History  # noqa: F401
from .waveforms import Waveform, Constant, PiecewiseLinear, as_waveform  # noqa: F401
from .network import Node, Topology, GROUND_INDEX  # noqa: F401
from .components import (  # noqa: F401
    Element,
    ElementKind,
    SourceType,
    Resistor,
    StorageDevice,
    Capacitor,
    Inductor,
    PowerSource,
    VoltageSource,
    CurrentSource,
)
from .solver import Stepper, StepperState, SystemAssembler, solve  # noqa: F401

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "IntegrationMethod",
    "SimulationConfig",
    "SolverConfig",
    "SimulationError",
    "TopologyError",
    "ParameterError",
    "SingularSystemError",
    "QueryRangeError",
    "History",
    "Waveform",
    "Constant",
    "PiecewiseLinear",
    "as_waveform",
    "Node",
    "Topology",
    "GROUND_INDEX",
    "Element",
    "ElementKind",
    "SourceType",
    "Resistor",
    "StorageDevice",
    "Capacitor",
    "Inductor",
    "PowerSource",
    "VoltageSource",
    "CurrentSource",
    "Stepper",
    "StepperState",
    "SystemAssembler",
    "solve",
    "__version__",
]
