"""Shared test fixtures for the sigcalc test suite.

Provides small signal registries and a ready ExpressionTree.
"""

import numpy as np
import pytest

from sigcalc.core.dataset import Signal, SignalList
from sigcalc.core.expression_tree import ExpressionTree


@pytest.fixture
def ramp():
    """y = [1, 2, 3] sampled at x = [0, 1, 2]."""
    return Signal(np.array([0.0, 1.0, 2.0]), np.array([1.0, 2.0, 3.0]))


@pytest.fixture
def signal_factory():
    """Factory fixture - create Signals from plain lists."""
    def _make(y, x=None):
        if x is None:
            x = list(range(len(y)))
        return Signal(np.asarray(x, dtype=float), np.asarray(y, dtype=float))
    return _make


@pytest.fixture
def registry(ramp, signal_factory):
    """Two entries: [0] is the ramp, [1] is y = [10, 20, 30] on the same grid."""
    return SignalList([ramp, signal_factory([10, 20, 30])])


@pytest.fixture
def tree(registry):
    return ExpressionTree(registry)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.config/sigcalc."""
    from sigcalc.core import settings

    settings_dir = tmp_path / "config"
    monkeypatch.setattr(settings, "SETTINGS_DIR", settings_dir)
    monkeypatch.setattr(settings, "SETTINGS_PATH", settings_dir / "settings.json")
    return settings_dir
