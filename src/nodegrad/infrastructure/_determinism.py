"""
Seeded random number context.

Every source of randomness in nodegrad (weight initialization, test data)
draws from a `DeterminismContext` passed in explicitly. Two contexts built
from the same seed produce identical sequences, so model initialization is
reproducible run to run.

The context wraps a NumPy ``Generator`` backed by ``PCG64``. It is not
thread-safe; concurrent callers should use separate contexts.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ._config import get_config


class DeterminismContext:
    """
    Seeded random stream producing flat float64 sequences.

    Parameters
    ----------
    seed : int
        Initial seed. Must be non-negative.
    """

    def __init__(self, seed: int = 0) -> None:
        self._seed = 0
        self._gen: np.random.Generator
        self.seed(seed)

    @property
    def current_seed(self) -> int:
        """The seed the stream was last (re)started from."""
        return self._seed

    def seed(self, value: int) -> None:
        """
        Restart the stream from `value`.

        Raises
        ------
        ValueError
            If `value` is negative.
        """
        value = int(value)
        if value < 0:
            raise ValueError(f"seed must be >= 0, got {value}")
        self._seed = value
        self._gen = np.random.Generator(np.random.PCG64(value))

    def uniform(self, low: float, high: float, count: int) -> np.ndarray:
        """
        Draw `count` samples from ``U(low, high)``.

        Returns
        -------
        numpy.ndarray
            Flat float64 array of length `count`.
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        if high < low:
            raise ValueError(f"high must be >= low, got low={low}, high={high}")
        return self._gen.uniform(float(low), float(high), size=int(count)).astype(
            np.float64, copy=False
        )

    def normal(self, count: int, mean: float = 0.0, std: float = 1.0) -> np.ndarray:
        """Draw `count` samples from ``N(mean, std**2)`` as a flat float64 array."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        return self._gen.normal(float(mean), float(std), size=int(count)).astype(
            np.float64, copy=False
        )

    def __repr__(self) -> str:
        return f"DeterminismContext(seed={self._seed})"


_DEFAULT: Optional[DeterminismContext] = None


def default_context() -> DeterminismContext:
    """
    Return the process-default context, seeded from ``NODEGRAD_SEED`` on
    first use.
    """
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = DeterminismContext(get_config().seed)
    return _DEFAULT


def set_seed(seed: int) -> DeterminismContext:
    """Re-seed the process-default context and return it."""
    ctx = default_context()
    ctx.seed(seed)
    return ctx
