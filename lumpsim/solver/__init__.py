from .assembler import (  # noqa: F401
    StampData,
    SystemAssembler,
    STAMPERS,
    stamp_element,
    stamp_conductance,
    stamp_current_source,
    stamp_voltage_source,
)
from .linear import solve  # noqa: F401
from .stepper import Stepper, StepperState  # noqa: F401
