import pytest

from lumpsim import Resistor, SimulationConfig, Topology, VoltageSource


@pytest.fixture
def config():
    return SimulationConfig(dt=1e-3)


@pytest.fixture
def source_and_resistor():
    """5 V source and 10 Ω resistor, both between node 1 and ground."""
    topo = Topology()
    n1 = topo.new_node("n1")
    topo.add_element(VoltageSource.dc("V1", n1.index, 0, 5.0))
    topo.add_element(Resistor("R1", n1.index, 0, 10.0))
    return topo


def kcl_residuals(topo, t=-1):
    """Sum of currents leaving each non-ground node through its elements."""
    residuals = {}
    for node in topo.nodes:
        if node.is_ground:
            continue
        total = 0.0
        for element in topo.elements_at(node.index):
            i = element.current(t)
            total += i if element.node_a == node.index else -i
        residuals[node.index] = total
    return residuals


@pytest.fixture
def kcl():
    return kcl_residuals
