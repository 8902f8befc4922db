"""
Domain-level optimizer contracts for nodegrad.

This module defines the `IOptimizer` protocol, which specifies the minimal
interface required for optimizer implementations (e.g., SGD, Adam).

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers read each parameter's accumulated gradient and update its value
  in place, strictly outside any backward traversal.
- Resetting gradients between steps is a caller obligation. An optimizer
  does not clear gradients on its own after `step()`; omitting
  `zero_grad()` makes the next backward pass add onto the already-applied
  gradient.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    Required methods
    ----------------
    - `step()` applies one optimization update to managed parameters.
    - `zero_grad()` resets gradients for managed parameters.
    """

    def step(self) -> None:
        """
        Apply one optimization step.

        Implementations should skip frozen parameters.
        """
        ...

    def zero_grad(self) -> None:
        """
        Reset gradients for all managed parameters.
        """
        ...

    @property
    def params(self) -> Iterable[object]:
        """
        Return the parameters managed by this optimizer.
        """
        ...
