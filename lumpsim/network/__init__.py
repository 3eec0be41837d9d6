from .node import Node, GROUND_INDEX  # noqa: F401
from .topology import Topology  # noqa: F401
