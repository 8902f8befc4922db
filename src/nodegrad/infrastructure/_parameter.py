"""
Concrete trainable parameter implementation.

This module defines `Parameter`, the infrastructure implementation of the
domain contract `IParameter`. A `Parameter` owns two tensors that outlive
every graph built from it:

- `value`, the trainable storage updated in place by optimizers
- `grad`, the persistent gradient accumulator

Each forward pass binds the parameter into the new graph as a leaf node
whose accumulator *is* the parameter's `grad` tensor, so backward writes
land directly on the parameter.

Design notes
------------
- A parameter may be declared with a shape only and initialized later
  (by a `WeightInitializer` or `copy_from_numpy`). Reading `value` before
  that raises `UninitializedParameter`.
- `grad` always exists (zeros after construction and after `zero_grad()`).
- The parameter records whether an optimizer has consumed its gradient
  since the last reset; the graph uses this to diagnose stale gradients.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ..domain._errors import ShapeMismatch, UninitializedParameter
from ..domain._parameter import IParameter
from ..domain._shape import Shape, ShapeLike
from .tensor._tensor import Tensor


class Parameter(IParameter):
    """
    Trainable value plus persistent gradient accumulator.

    Parameters
    ----------
    shape : ShapeLike
        Parameter shape.
    data : array-like or Tensor, optional
        Initial value. When omitted the parameter stays uninitialized.
    requires_grad : bool, optional
        Whether gradients are accumulated. Defaults to True.
    name : str, optional
        Name used in diagnostics.
    """

    def __init__(
        self,
        shape: ShapeLike,
        data: Any = None,
        *,
        requires_grad: bool = True,
        name: Optional[str] = None,
    ) -> None:
        self._shape = Shape.of(shape)
        self._value: Optional[Tensor] = None
        self._grad = Tensor.zeros(self._shape)
        self._requires_grad = bool(requires_grad)
        self._name = name
        self._stepped = False
        if data is not None:
            self.copy_from_numpy(data)

    @classmethod
    def from_tensor(
        cls,
        tensor: Tensor,
        *,
        requires_grad: bool = True,
        name: Optional[str] = None,
    ) -> "Parameter":
        """Build an initialized parameter holding a copy of `tensor`."""
        p = cls(tensor.shape, requires_grad=requires_grad, name=name)
        p._value = tensor.clone()
        return p

    # ---- identity ----
    @property
    def name(self) -> Optional[str]:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = value

    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def numel(self) -> int:
        return self._shape.numel

    # ---- training control ----
    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this parameter should accumulate gradients.

        Returns
        -------
        bool
            True if gradients should be accumulated, False if frozen.
        """
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        self._requires_grad = bool(value)

    # ---- value ----
    @property
    def is_initialized(self) -> bool:
        return self._value is not None

    @property
    def value(self) -> Tensor:
        """
        Return the value tensor (shared, not copied).

        Raises
        ------
        UninitializedParameter
            If the parameter has not been initialized yet.
        """
        if self._value is None:
            raise UninitializedParameter(self._name)
        return self._value

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Set the value from an array-like (or Tensor), initializing the
        parameter if needed.

        Raises
        ------
        ShapeMismatch
            If `arr` does not hold exactly ``numel`` elements.
        """
        if self._value is None:
            self._value = Tensor(self._shape, arr)
        else:
            self._value.copy_from_numpy(arr.to_numpy() if isinstance(arr, Tensor) else arr)

    def _storage_for_init(self) -> Tensor:
        """
        Return the value tensor, allocating zeros if uninitialized.

        Used by initializers, which fill it in place.
        """
        if self._value is None:
            self._value = Tensor.zeros(self._shape)
        return self._value

    def to_numpy(self):
        """Return a shaped copy of the value."""
        return self.value.to_numpy()

    # ---- gradient ----
    @property
    def grad(self) -> Tensor:
        """
        Return the persistent gradient accumulator.

        Notes
        -----
        Backward passes *add* into this tensor. It is only reset by
        `zero_grad()`.
        """
        return self._grad

    def zero_grad(self) -> None:
        """
        Reset the gradient accumulator to zero and clear the stepped mark.

        Idempotent.
        """
        self._grad.fill(0.0)
        self._stepped = False

    def accumulate_grad(self, grad: Tensor) -> None:
        """
        Add `grad` into the accumulator.

        Raises
        ------
        ShapeMismatch
            If `grad` does not match the parameter's shape.
        """
        if not grad.shape.same_as(self._shape):
            raise ShapeMismatch("accumulate_grad", self._shape, grad.shape)
        self._grad.add_(grad)

    # ---- optimizer bookkeeping ----
    def mark_stepped(self) -> None:
        """Record that an optimizer applied the current gradient."""
        self._stepped = True

    @property
    def has_stale_grad(self) -> bool:
        """
        True if an optimizer consumed the current (non-zero) gradient and
        `zero_grad()` has not been called since.
        """
        return self._stepped and bool(self._grad._raw().any())

    def __repr__(self) -> str:
        label = f", name={self._name!r}" if self._name else ""
        state = "" if self._value is not None else ", uninitialized"
        return (
            f"Parameter(shape={self._shape.dims}{label}, "
            f"requires_grad={self._requires_grad}{state})"
        )


def zero_grad(parameters: Iterable[IParameter]) -> None:
    """Call `zero_grad()` on every parameter in `parameters`."""
    for p in parameters:
        p.zero_grad()
