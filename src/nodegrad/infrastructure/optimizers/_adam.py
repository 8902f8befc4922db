"""
Adam optimizer implementation.

The optimizer updates `Parameter` values in place from their accumulated
gradients and keeps per-parameter first and second moment estimates.

Design notes
------------
- Frozen parameters (``requires_grad=False``) are skipped and get no state.
- State is created lazily on a parameter's first update.
- Like `SGD`, `step()` marks parameters as stepped and leaves gradients
  alone; resetting them is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

import numpy as np

from .._parameter import Parameter


@dataclass
class Adam:
    """
    Adam optimizer.

    Update rule
    -----------
    Let ``g_t`` be the gradient at step ``t``:

        m_t = beta1 * m_{t-1} + (1 - beta1) * g_t
        v_t = beta2 * v_{t-1} + (1 - beta2) * (g_t ** 2)

        m_hat = m_t / (1 - beta1^t)
        v_hat = v_t / (1 - beta2^t)

        p <- p - lr * m_hat / (sqrt(v_hat) + eps)

    If ``weight_decay > 0`` (classical L2 regularization):

        g_t <- g_t + weight_decay * p

    Parameters
    ----------
    params : Sequence[Parameter]
        Parameters to be optimized.
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    betas : tuple[float, float], optional
        Exponential decay rates for the first and second moments.
        Each must be in (0, 1). Defaults to (0.9, 0.999).
    eps : float, optional
        Numerical stability epsilon added to the denominator. Must be positive.
        Defaults to 1e-8.
    weight_decay : float, optional
        Classical L2 regularization coefficient (coupled). Must be non-negative.
        Defaults to 0.0.
    """

    params: Sequence[Parameter]
    lr: float = 1e-3
    betas: Tuple[float, float] = (0.9, 0.999)
    eps: float = 1e-8
    weight_decay: float = 0.0

    def __init__(
        self,
        params: Iterable[Parameter],
        *,
        lr: float = 1e-3,
        betas: Tuple[float, float] = (0.9, 0.999),
        eps: float = 1e-8,
        weight_decay: float = 0.0,
    ) -> None:
        """
        Construct an Adam optimizer.

        Raises
        ------
        ValueError
            If any hyperparameter is outside its valid range.
        """
        self.params = list(params)
        self.lr = float(lr)
        self.betas = (float(betas[0]), float(betas[1]))
        self.eps = float(eps)
        self.weight_decay = float(weight_decay)

        b1, b2 = self.betas
        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if not (0.0 < b1 < 1.0) or not (0.0 < b2 < 1.0):
            raise ValueError(f"betas must be in (0,1), got {self.betas}")
        if self.eps <= 0.0:
            raise ValueError(f"eps must be > 0, got {self.eps}")
        if self.weight_decay < 0.0:
            raise ValueError(f"weight_decay must be >= 0, got {self.weight_decay}")

        # Per-parameter state: id(p) -> {"t": int, "m": ndarray, "v": ndarray}
        self._state: Dict[int, Dict[str, object]] = {}

    def zero_grad(self) -> None:
        """Reset the gradient accumulator of every managed parameter."""
        for p in self.params:
            p.zero_grad()

    def state_for(self, p: Parameter) -> Dict[str, object]:
        """Return the optimizer state of `p` (empty before its first update)."""
        return self._state.get(id(p), {})

    def step(self) -> None:
        """
        Apply one Adam update step to all managed parameters.

        Notes
        -----
        - Frozen parameters are skipped.
        - Weight decay is classical L2 (coupled with the gradient), not
          decoupled AdamW.
        """
        b1, b2 = self.betas

        for p in self.params:
            if not p.requires_grad:
                continue

            w = p.value._raw()
            g = p.grad._raw()

            st = self._state.get(id(p))
            if st is None:
                st = {"t": 0, "m": np.zeros_like(w), "v": np.zeros_like(w)}
                self._state[id(p)] = st

            st["t"] = int(st["t"]) + 1
            t = int(st["t"])
            m: np.ndarray = st["m"]  # type: ignore[assignment]
            v: np.ndarray = st["v"]  # type: ignore[assignment]

            # Classical L2 weight decay (coupled): g <- g + wd * p
            if self.weight_decay != 0.0:
                g = g + self.weight_decay * w

            m *= b1
            m += (1.0 - b1) * g
            v *= b2
            v += (1.0 - b2) * (g * g)

            m_hat = m / (1.0 - b1**t)
            v_hat = v / (1.0 - b2**t)

            w -= self.lr * m_hat / (np.sqrt(v_hat) + self.eps)
            p.mark_stepped()
