"""
Whole-signal reductions backing the dataset-only builtin functions.

All functions take a Signal and return a new Signal; the input is never
modified.
"""

import numpy as np
from scipy import fft as sp_fft
from scipy.integrate import cumulative_trapezoid

from .dataset import Signal
from .errors import InvalidFunctionArgumentError


def integral(signal: Signal) -> Signal:
    """Cumulative trapezoidal integral of y over x, starting at 0."""
    if len(signal) < 2:
        return signal.copy()
    return signal.with_y(cumulative_trapezoid(signal.y, signal.x, initial=0.0))


def derivative(signal: Signal) -> Signal:
    """Backward-difference dy/dx. The first point has no predecessor and is 0."""
    dydx = np.zeros(len(signal))
    if len(signal) >= 2:
        with np.errstate(divide='ignore', invalid='ignore'):
            dydx[1:] = np.diff(signal.y) / np.diff(signal.x)
    return signal.with_y(dydx)


def rms(signal: Signal) -> Signal:
    """Running root-mean-square: point i is the RMS of samples 0..i."""
    counts = np.arange(1, len(signal) + 1)
    return signal.with_y(np.sqrt(np.cumsum(signal.y ** 2) / counts))


def fft(signal: Signal) -> Signal:
    """Single-sided amplitude spectrum; x of the result is frequency.

    The sample period is the mean x spacing, so x is expected to be roughly
    uniform.
    """
    n = len(signal)
    if n < 2:
        raise InvalidFunctionArgumentError(
            f"Function 'fft' requires at least 2 points (got {n})")

    dt = (signal.x[-1] - signal.x[0]) / (n - 1)
    amplitude = np.abs(sp_fft.rfft(signal.y)) / n
    # Fold the negative frequencies onto the positive side, except DC and
    # (for even n) Nyquist which have no mirror
    if n % 2 == 0:
        amplitude[1:-1] *= 2.0
    else:
        amplitude[1:] *= 2.0

    with np.errstate(divide='ignore', invalid='ignore'):
        frequency = sp_fft.rfftfreq(n, d=dt)
    return Signal(frequency, amplitude)
