from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List

from ..components.base import Element
from ..components.passive import StorageDevice
from ..components.sources import CurrentSource, VoltageSource
from ..errors import TopologyError
from .node import GROUND_INDEX, Node

logger = logging.getLogger(__name__)


class Topology:
    """
    Fixed set of nodes and the elements connecting them.

    The topology owns both collections for the whole simulation. Elements
    are kept in creation order, which is also the stamping order and the
    order in which voltage sources receive their auxiliary unknowns.

    Unknown vector layout (ground removed):
        [V(node 1) ... V(node n)] [I(vsource 0) ... I(vsource m-1)]

    Build either incrementally (a ground node is created for you):
        topo = Topology()
        n1 = topo.new_node("in")
        topo.add_element(Resistor("R1", n1.index, 0, 10.0))

    or from ready-made parts, in which case the ground node must be included.
    """

    def __init__(self, nodes: Iterable[Node] | None = None,
                 elements: Iterable[Element] | None = None) -> None:
        self._nodes: Dict[int, Node] = {}
        self._elements: List[Element] = []
        self._by_name: Dict[str, Element] = {}
        self._finalized = False
        self._in_use = False

        if nodes is None:
            self.add_node(Node(GROUND_INDEX, "gnd"))
        else:
            for node in nodes:
                self.add_node(node)
        for element in elements or ():
            self.add_element(element)

    # ---- construction ----
    def _check_open(self) -> None:
        if self._finalized:
            raise TopologyError("Topology is finalized; nodes and elements are fixed.")

    def add_node(self, node: Node) -> Node:
        self._check_open()
        if node.index in self._nodes:
            raise TopologyError(f"Node index {node.index} already defined.")
        self._nodes[node.index] = node
        return node

    def new_node(self, name: str = "", initial_voltage: float = 0.0) -> Node:
        """Create a node with the next free index."""
        index = max(self._nodes, default=-1) + 1
        return self.add_node(Node(index, name, initial_voltage))

    def add_element(self, element: Element) -> Element:
        self._check_open()
        if element.name in self._by_name:
            raise TopologyError(f"Element '{element.name}' already exists.")
        self._elements.append(element)
        self._by_name[element.name] = element
        return element

    def finalize(self) -> Topology:
        """
        Validate the topology and assign auxiliary unknowns.

        Raises:
            TopologyError: If ground is missing, node indices are not dense
                (0..N-1), an element references an undefined node, or an
                element already belongs to another topology. Nothing is
                modified when the check fails.
        """
        if self._finalized:
            return self
        if GROUND_INDEX not in self._nodes:
            raise TopologyError("Topology has no ground node (index 0).")
        if sorted(self._nodes) != list(range(len(self._nodes))):
            raise TopologyError(
                f"Node indices must be dense 0..{len(self._nodes) - 1}, got {sorted(self._nodes)}."
            )
        for element in self._elements:
            for idx in element.terminals:
                if idx not in self._nodes:
                    raise TopologyError(
                        f"Element '{element.name}' references undefined node {idx}."
                    )
        # elements are only written once every check has passed
        for element in self._elements:
            element.check_bindable(self)

        n = self.n
        for k, source in enumerate(self.voltage_sources):
            source.aux_index = n + k
        for element in self._elements:
            element.bind(self)

        self._finalized = True
        logger.info(
            "Topology finalized: %d nodes (+ground), %d elements, %d voltage sources.",
            n, len(self._elements), self.m,
        )
        return self

    def prepare(self, history_limit: int | None = None) -> None:
        """
        Finalize and reset every history before a run.

        A topology can drive a single Stepper; its histories are the
        simulation state.
        """
        self.finalize()
        if self._in_use:
            raise TopologyError("Topology is already attached to a stepper.")
        for node in self._nodes.values():
            node.reset_history(history_limit)
        for element in self._elements:
            element.reset_history(history_limit)
        self._in_use = True

    # ---- queries ----
    @property
    def ground(self) -> Node:
        return self.node(GROUND_INDEX)

    @property
    def n(self) -> int:
        """Number of non-ground nodes."""
        return len(self._nodes) - (1 if GROUND_INDEX in self._nodes else 0)

    @property
    def m(self) -> int:
        """Number of voltage sources (auxiliary unknowns)."""
        return len(self.voltage_sources)

    @property
    def size(self) -> int:
        return self.n + self.m

    @property
    def nodes(self) -> List[Node]:
        """Nodes ordered by index."""
        return [self._nodes[i] for i in sorted(self._nodes)]

    @property
    def elements(self) -> tuple[Element, ...]:
        return tuple(self._elements)

    @property
    def voltage_sources(self) -> List[VoltageSource]:
        return [e for e in self._elements if isinstance(e, VoltageSource)]

    @property
    def storage_devices(self) -> List[StorageDevice]:
        return [e for e in self._elements if isinstance(e, StorageDevice)]

    @property
    def current_sources(self) -> List[CurrentSource]:
        return [e for e in self._elements if isinstance(e, CurrentSource)]

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def node(self, index: int) -> Node:
        try:
            return self._nodes[index]
        except KeyError as exc:
            raise TopologyError(f"Unknown node index {index}.") from exc

    def node_by_name(self, name: str) -> Node:
        for node in self._nodes.values():
            if node.name == name:
                return node
        raise TopologyError(f"Unknown node '{name}'.")

    def element(self, name: str) -> Element:
        try:
            return self._by_name[name]
        except KeyError as exc:
            raise TopologyError(f"Unknown element '{name}'.") from exc

    def elements_at(self, index: int) -> List[Element]:
        """Elements with a terminal on the given node."""
        return [e for e in self._elements if index in e.terminals]

    def row(self, index: int) -> int | None:
        """Row/column of a node voltage in the MNA system (None for ground)."""
        if index == GROUND_INDEX:
            return None
        return index - 1

    def summary(self, t: int = -1) -> str:
        lines = [node.summary(t) for node in self.nodes]
        lines.extend(element.summary(t) for element in self._elements)
        return "\n".join(lines)
