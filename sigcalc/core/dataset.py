"""Signal data model and the dataset registry interface."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence

import numpy as np


@dataclass(eq=False)
class Signal:
    """An ordered set of (x, y) samples stored as two float64 arrays."""

    x: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        self.x = np.asarray(self.x, dtype=np.float64)
        self.y = np.asarray(self.y, dtype=np.float64)
        if self.x.ndim != 1 or self.y.ndim != 1:
            raise ValueError("Signal data must be one-dimensional")
        if self.x.shape != self.y.shape:
            raise ValueError(
                f"Signal x and y lengths differ ({len(self.x)} != {len(self.y)})")

    @classmethod
    def from_samples(cls, y: Sequence[float], dt: float = 1.0, t0: float = 0.0) -> "Signal":
        """Build a uniformly sampled signal starting at t0."""
        y = np.asarray(y, dtype=np.float64)
        return cls(t0 + dt * np.arange(len(y)), y)

    def __len__(self) -> int:
        return len(self.x)

    def copy(self) -> "Signal":
        """Deep copy; the clone shares no buffers with self."""
        return Signal(self.x.copy(), self.y.copy())

    def with_y(self, y: np.ndarray) -> "Signal":
        """New signal with a copy of this x axis and the given y values."""
        return Signal(self.x.copy(), y)

    def scale_x(self, factor: float) -> None:
        """Multiply the x axis in place. Only used on owned clones."""
        self.x = self.x * factor

    def __repr__(self) -> str:
        return f"Signal(points={len(self)})"


class DatasetRegistry(Protocol):
    """Read-only, index-addressed collection of signals."""

    def size(self) -> int:
        ...

    def get(self, index: int) -> Optional[Signal]:
        ...


class SignalList:
    """List-backed DatasetRegistry."""

    def __init__(self, signals: Optional[Iterable[Optional[Signal]]] = None):
        self._signals: List[Optional[Signal]] = list(signals or [])

    def size(self) -> int:
        return len(self._signals)

    def get(self, index: int) -> Optional[Signal]:
        return self._signals[index]

    def append(self, signal: Optional[Signal]) -> int:
        """Add a signal and return its index."""
        self._signals.append(signal)
        return len(self._signals) - 1

    def __len__(self) -> int:
        return len(self._signals)

    def __iter__(self):
        return iter(self._signals)
