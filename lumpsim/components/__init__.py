from .base import Element, ElementKind, SourceType  # noqa: F401
from .passive import Resistor, StorageDevice, Capacitor, Inductor  # noqa: F401
from .sources import PowerSource, VoltageSource, CurrentSource  # noqa: F401
