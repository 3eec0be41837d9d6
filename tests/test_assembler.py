"""
Test: MNA stamps produced by the system assembler.

Unknown layout: [V(1) .. V(n)] followed by one branch current per voltage
source. Ground rows/columns never appear.
"""
import numpy as np
import pytest

from lumpsim import (
    Capacitor,
    CurrentSource,
    ElementKind,
    Inductor,
    IntegrationMethod,
    Resistor,
    SimulationConfig,
    Stepper,
    SystemAssembler,
    Topology,
    VoltageSource,
)
from lumpsim.solver import STAMPERS


def _two_nodes():
    topo = Topology()
    a = topo.new_node("a")
    b = topo.new_node("b")
    return topo, a.index, b.index


def test_every_element_kind_has_a_stamp():
    assert set(STAMPERS) == set(ElementKind)


def test_resistor_stamp(config):
    topo, a, b = _two_nodes()
    topo.add_element(Resistor("R1", a, b, 2.0))
    topo.add_element(Resistor("R2", b, 0, 4.0))

    A, z = SystemAssembler(topo, config).assemble(0, config.dt)
    np.testing.assert_allclose(A, [[0.5, -0.5], [-0.5, 0.75]])
    np.testing.assert_allclose(z, [0.0, 0.0])


def test_voltage_source_stamp(config):
    topo = Topology()
    n1 = topo.new_node()
    topo.add_element(VoltageSource.dc("V1", n1.index, 0, 5.0))
    topo.add_element(Resistor("R1", n1.index, 0, 10.0))

    A, z = SystemAssembler(topo, config).assemble(0, config.dt)
    np.testing.assert_allclose(A, [[0.1, 1.0], [1.0, 0.0]])
    np.testing.assert_allclose(z, [0.0, 5.0])


def test_floating_voltage_source_stamp(config):
    topo, a, b = _two_nodes()
    topo.add_element(VoltageSource.dc("V1", a, b, 3.0))

    A, z = SystemAssembler(topo, config).assemble(0, config.dt)
    assert A[0, 2] == 1.0 and A[2, 0] == 1.0
    assert A[1, 2] == -1.0 and A[2, 1] == -1.0
    assert z[2] == 3.0


def test_current_source_stamp(config):
    topo, a, b = _two_nodes()
    topo.add_element(CurrentSource.dc("I1", a, b, 2.0))
    topo.add_element(CurrentSource.dc("I2", 0, a, 0.5))

    A, z = SystemAssembler(topo, config).assemble(0, config.dt)
    np.testing.assert_allclose(z, [-2.0 + 0.5, 2.0])
    assert not A.any()


def test_pwl_source_evaluated_at_step_time():
    config = SimulationConfig(dt=0.25)
    topo = Topology()
    n1 = topo.new_node()
    topo.add_element(VoltageSource.pwl("V1", n1.index, 0, [(0.0, 0.0), (1.0, 10.0)]))
    topo.add_element(Resistor("R1", n1.index, 0, 1.0))

    _, z = SystemAssembler(topo, config).assemble(1, 0.5)
    assert z[1] == pytest.approx(5.0)


def test_capacitor_companion_backward_euler():
    config = SimulationConfig(dt=1e-3)
    topo = Topology()
    n1 = topo.new_node()
    topo.add_element(Capacitor("C1", n1.index, 0, 1e-3, initial_voltage=2.0))

    A, z = SystemAssembler(topo, config).assemble(0, config.dt)
    # g = C/dt = 1, i_eq = -g * v_prev = -2 -> z[a] -= i_eq
    np.testing.assert_allclose(A, [[1.0]])
    np.testing.assert_allclose(z, [2.0])


def test_inductor_companion_backward_euler():
    config = SimulationConfig(dt=0.1)
    topo = Topology()
    n1 = topo.new_node()
    topo.add_element(Inductor("L1", n1.index, 0, 1.0, initial_current=0.3))

    A, z = SystemAssembler(topo, config).assemble(0, config.dt)
    np.testing.assert_allclose(A, [[0.1]])
    np.testing.assert_allclose(z, [-0.3])


def test_trapezoidal_companion_after_first_step():
    config = SimulationConfig(dt=1e-3, method=IntegrationMethod.TRAPEZOIDAL)
    topo = Topology()
    n1 = topo.new_node()
    topo.add_element(CurrentSource.dc("I1", 0, n1.index, 1.0))
    c1 = topo.add_element(Capacitor("C1", n1.index, 0, 1e-3))
    sim = Stepper(topo, config)

    # first step falls back to backward Euler: g = C/dt = 1, v1 = 1
    sim.step()
    assert sim.voltage(n1.index) == pytest.approx(1.0)
    assert c1.current() == pytest.approx(1.0)

    A, z = sim.assembler.assemble(1, 2 * config.dt)
    g = 2.0
    np.testing.assert_allclose(A, [[g]])
    # i_eq = -(g * v_prev + i_prev) = -3, plus 1 A injected by I1
    np.testing.assert_allclose(z, [3.0 + 1.0])


def test_assemble_returns_fresh_arrays(config, source_and_resistor):
    assembler = SystemAssembler(source_and_resistor, config)
    A1, z1 = assembler.assemble(0, config.dt)
    A1[:] = 99.0
    A2, _ = assembler.assemble(0, config.dt)
    assert A2[0, 0] == pytest.approx(0.1)
