from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from numbers import Real
from typing import Sequence, Tuple
import math
import numpy as np

from .errors import ParameterError

Breakpoint = Tuple[float, float]


class Waveform(ABC):
    """Time-dependent source value."""

    @abstractmethod
    def value(self, time: float) -> float: ...

    def __call__(self, time: float) -> float:
        return self.value(time)


@dataclass(frozen=True)
class Constant(Waveform):
    """DC value, identical at every time."""
    level: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.level):
            raise ParameterError(f"Source value must be finite, got {self.level!r}.")

    def value(self, time: float) -> float:
        return float(self.level)


@dataclass(frozen=True)
class PiecewiseLinear(Waveform):
    """
    Waveform defined by (time, value) breakpoints.

    Values between breakpoints are linearly interpolated; before the first
    and after the last breakpoint the waveform is clamped.

    Args:
        points: Breakpoints with strictly increasing times.
    """
    points: Tuple[Breakpoint, ...]
    _t: np.ndarray = field(init=False, repr=False, compare=False)
    _v: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            pts = tuple((float(t), float(v)) for t, v in self.points)
        except (TypeError, ValueError) as exc:
            raise ParameterError("PWL breakpoints must be (time, value) pairs.") from exc
        if not pts:
            raise ParameterError("A PWL waveform needs at least one breakpoint.")
        arr = np.asarray(pts, dtype=float)
        if not np.all(np.isfinite(arr)):
            raise ParameterError("PWL breakpoints must be finite.")
        if np.any(np.diff(arr[:, 0]) <= 0):
            raise ParameterError("PWL breakpoint times must be strictly increasing.")
        object.__setattr__(self, "points", pts)
        object.__setattr__(self, "_t", arr[:, 0])
        object.__setattr__(self, "_v", arr[:, 1])

    def value(self, time: float) -> float:
        # np.interp clamps to the end values outside [t0, tN]
        return float(np.interp(time, self._t, self._v))


def as_waveform(source: float | Sequence[Breakpoint] | Waveform) -> Waveform:
    """
    Normalize a source specification.

    A number becomes a Constant, a sequence of (time, value) pairs a
    PiecewiseLinear, and a Waveform is returned unchanged.
    """
    if isinstance(source, Waveform):
        return source
    if isinstance(source, Real):
        return Constant(float(source))
    if isinstance(source, (str, bytes)):
        raise ParameterError(f"Cannot build a waveform from {source!r}.")
    return PiecewiseLinear(tuple(source))
