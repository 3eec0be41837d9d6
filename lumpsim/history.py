from __future__ import annotations
from collections import deque
from typing import Iterator
import numpy as np

from .errors import QueryRangeError

Array = np.ndarray


class History:
    """
    Append-only, step-indexed series of samples.

    Index 0 is the initial condition, index k the value solved at step k.
    ``t = -1`` always means the most recent sample. With ``maxlen`` set the
    series becomes a ring buffer: absolute indices are kept, and samples that
    fell out of the window raise QueryRangeError like not-yet-computed ones.
    """

    def __init__(self, initial: float | None = None, maxlen: int | None = None) -> None:
        self._values: deque[float] = deque(maxlen=maxlen)
        self._count = 0
        if initial is not None:
            self.append(initial)

    @property
    def maxlen(self) -> int | None:
        return self._values.maxlen

    @property
    def first_index(self) -> int:
        """Absolute index of the oldest retained sample."""
        return self._count - len(self._values)

    @property
    def last_index(self) -> int:
        return self._count - 1

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def append(self, value: float) -> None:
        self._values.append(float(value))
        self._count += 1

    def latest(self) -> float:
        return self.at(-1)

    def previous(self) -> float:
        """Sample before the latest one."""
        t = self.last_index - 1
        if t < self.first_index:
            raise QueryRangeError(t, self.first_index, self.last_index)
        return self._values[t - self.first_index]

    def at(self, t: int = -1) -> float:
        if t == -1:
            t = self.last_index
        if t < self.first_index or t > self.last_index:
            raise QueryRangeError(t, self.first_index, self.last_index)
        return self._values[t - self.first_index]

    def as_array(self) -> Array:
        """Retained samples, oldest first."""
        return np.fromiter(self._values, dtype=float, count=len(self._values))
