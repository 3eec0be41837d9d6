from __future__ import annotations

import logging
from enum import Enum
import numpy as np

from ..config import SimulationConfig, SolverConfig
from ..network.topology import Topology
from .assembler import SystemAssembler
from .linear import solve

logger = logging.getLogger(__name__)

Array = np.ndarray


class StepperState(Enum):
    UNINITIALIZED = "uninitialized"
    STEPPING = "stepping"


class Stepper:
    """
    Advances a circuit through fixed time steps.

    Each step() is atomic: assemble A x = z from the previous step's
    histories, solve it, append the node voltages, then append the currents
    of storage devices and sources. Step k is solved at time k * dt; sample 0
    of every history is the initial condition.

    If the solve fails, SingularSystemError propagates and no history is
    touched, so every previous step remains valid and queryable.

    Example:
        topo = Topology()
        n1 = topo.new_node("in")
        topo.add_element(VoltageSource.dc("V1", n1.index, 0, 5.0))
        topo.add_element(Resistor("R1", n1.index, 0, 10.0))
        sim = Stepper(topo, SimulationConfig(dt=1e-3))
        sim.step()
        sim.voltage(n1.index)            # 5.0
        sim.current("R1")                # 0.5
    """

    def __init__(self, topology: Topology, config: SimulationConfig,
                 solver_config: SolverConfig | None = None) -> None:
        self.topology = topology
        self.config = config
        self.solver_config = solver_config or SolverConfig()
        topology.prepare(config.history_limit)
        self.assembler = SystemAssembler(topology, config)
        self.step_count = 0
        self.last_solution: Array | None = None
        logger.info(
            "Stepper ready: %d unknowns, dt=%g s, method=%s.",
            topology.size, config.dt, config.method.name,
        )

    @property
    def state(self) -> StepperState:
        return StepperState.UNINITIALIZED if self.step_count == 0 else StepperState.STEPPING

    @property
    def time(self) -> float:
        """Simulated time of the latest completed step."""
        return self.step_count * self.config.dt

    def step(self) -> Array:
        """
        Compute the next step.

        Returns:
            Solution vector [node voltages (ground excluded), vsource currents].

        Raises:
            SingularSystemError: If the assembled system cannot be solved.
        """
        topo = self.topology
        k = self.step_count
        t_next = (k + 1) * self.config.dt

        A, z = self.assembler.assemble(k, t_next)
        x = solve(A, z, self.solver_config, step=k + 1)

        for node in topo.nodes:
            row = topo.row(node.index)
            node.voltages.append(0.0 if row is None else x[row])

        for device in topo.storage_devices:
            device.advance(device.voltage(k + 1), k, self.config)
        for source in topo.voltage_sources:
            source.record(x[source.aux_index])
        for source in topo.current_sources:
            source.record(source.value(t_next))

        self.step_count = k + 1
        self.last_solution = x
        logger.debug("Step %d done (t=%g s).", self.step_count, t_next)
        return x

    def run(self, steps: int) -> Stepper:
        """Call step() ``steps`` times."""
        for _ in range(steps):
            self.step()
        return self

    def voltage(self, node_index: int, t: int = -1) -> float:
        return self.topology.node(node_index).voltage(t)

    def current(self, element_name: str, t: int = -1) -> float:
        return self.topology.element(element_name).current(t)

    def summary(self, t: int = -1) -> str:
        header = f"step {self.step_count} (t = {self.time:.6g} s)"
        return "\n".join([header, self.topology.summary(t)])
