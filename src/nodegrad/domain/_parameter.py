"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable parameters used
by models and optimization algorithms. A parameter outlives any single
forward/backward cycle: it appears as a leaf node in every graph built from
it and owns the gradient accumulator those graphs write into.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class IParameter(Protocol):
    """
    Domain-level interface for trainable parameters.

    Notes
    -----
    - Parameters may be frozen or unfrozen via the `requires_grad` flag.
    - `grad` is a persistent accumulator. Backward passes *add* into it;
      only `zero_grad()` resets it. Skipping `zero_grad()` between optimizer
      steps therefore leaks gradients from one step into the next.
    """

    # ---- identity ----
    @property
    def name(self) -> Optional[str]:
        """Optional name used in diagnostics."""
        ...

    # ---- training control ----
    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this parameter should accumulate gradients.

        Returns
        -------
        bool
            True if gradients should be accumulated for this parameter,
            False if the parameter is frozen.
        """
        ...

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        """Enable or disable gradient accumulation for this parameter."""
        ...

    # ---- value / gradient access ----
    @property
    def value(self) -> ITensor:
        """
        Return the current value.

        Raises
        ------
        UninitializedParameter
            If the parameter has not been initialized yet.
        """
        ...

    @property
    def grad(self) -> ITensor:
        """
        Return the gradient accumulator (same shape as the value, zeros
        after `zero_grad()`).
        """
        ...

    def zero_grad(self) -> None:
        """
        Reset the gradient accumulator to zero.

        Calling it repeatedly is equivalent to calling it once.
        """
        ...
