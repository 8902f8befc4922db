"""
Stochastic Gradient Descent (SGD) optimizer implementation.

The optimizer updates `Parameter` values in place from their accumulated
gradients and a fixed learning rate, optionally applying classical L2
regularization (coupled weight decay).

Design notes
------------
- Optimizers read `p.grad` and write `p.value`; they never touch graphs
  and must only run outside a backward pass.
- Frozen parameters (``requires_grad=False``) are skipped.
- `step()` does not reset gradients. After a step each parameter is marked
  as stepped, and binding it into a new graph before `zero_grad()` is
  diagnosed as a stale gradient.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .._parameter import Parameter


@dataclass
class SGD:
    """
    Stochastic Gradient Descent (SGD) optimizer.

    Update rule
    -----------
    For each parameter ``p`` with gradient ``g``:

    - If ``weight_decay > 0`` (classical L2 regularization):
        ``g <- g + weight_decay * p``
    - Parameter update:
        ``p <- p - lr * g``

    Parameters
    ----------
    params : Sequence[Parameter]
        Parameters to be optimized.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    weight_decay : float, optional
        Classical L2 weight decay coefficient (coupled). Must be non-negative.
        Defaults to 0.0.
    """

    params: Sequence[Parameter]
    lr: float = 1e-3
    weight_decay: float = 0.0

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        weight_decay: float = 0.0,
    ) -> None:
        """
        Construct an SGD optimizer.

        Raises
        ------
        ValueError
            If ``lr <= 0`` or ``weight_decay < 0``.
        """
        self.params = list(params)
        self.lr = float(lr)
        self.weight_decay = float(weight_decay)

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if self.weight_decay < 0.0:
            raise ValueError(f"weight_decay must be >= 0, got {self.weight_decay}")

    def zero_grad(self) -> None:
        """Reset the gradient accumulator of every managed parameter."""
        for p in self.params:
            p.zero_grad()

    def step(self) -> None:
        """
        Apply one SGD update step to all managed parameters.

        Notes
        -----
        - Frozen parameters are skipped.
        - The update is performed in place on ``p.value``.
        """
        for p in self.params:
            if not p.requires_grad:
                continue

            w = p.value._raw()
            g = p.grad._raw()

            # Optional L2 weight decay (decoupled is AdamW; this is classical)
            if self.weight_decay != 0.0:
                g = g + self.weight_decay * w

            w -= self.lr * g
            p.mark_stepped()
