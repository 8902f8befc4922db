"""
Backend capability interface.

A backend is the numeric engine the ops run on. It exposes a fixed set of
pure functions over tensors; ops never touch raw buffers themselves, which
is what makes backends swappable (reference CPU, vectorized, accelerator)
without changes to the op implementations or the autograd engine.

Contract shared by every operation
----------------------------------
- Operand shapes are validated *before* any computation. Incompatible
  shapes raise `ShapeMismatch` carrying the expected and actual shapes.
- A result never has a cardinality different from the documented one.
- Inputs are never mutated; every operation returns a new tensor.

Determinism is a per-backend promise: the reference CPU backend pins its
reduction order, other backends may document deviations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ._shape import ShapeLike
from ._tensor import ITensor


class IBackend(ABC):
    """
    Abstract numeric backend.

    Attributes
    ----------
    name : str
        Registry key of the backend (e.g., ``"cpu"``).
    deterministic : bool
        Whether repeated runs on identical inputs yield bit-identical
        results.
    """

    name: str = "abstract"
    deterministic: bool = False

    # ---- factories ----
    @abstractmethod
    def zeros(self, shape: ShapeLike) -> ITensor:
        """Return a zero-filled tensor of `shape`."""
        ...

    @abstractmethod
    def ones(self, shape: ShapeLike) -> ITensor:
        """Return a one-filled tensor of `shape`."""
        ...

    @abstractmethod
    def full(self, shape: ShapeLike, value: float) -> ITensor:
        """Return a tensor of `shape` filled with `value`."""
        ...

    # ---- linear algebra ----
    @abstractmethod
    def matmul(self, a: ITensor, b: ITensor) -> ITensor:
        """
        Matrix product of two rank-2 tensors.

        ``(m, k) @ (k, n) -> (m, n)``

        Raises
        ------
        ShapeMismatch
            If either operand is not rank 2 or the inner dimensions differ.
        """
        ...

    @abstractmethod
    def transpose(self, a: ITensor) -> ITensor:
        """Transpose a rank-2 tensor: ``(m, n) -> (n, m)``."""
        ...

    # ---- elementwise binary ----
    @abstractmethod
    def add(self, a: ITensor, b: ITensor) -> ITensor:
        """Elementwise ``a + b`` for identically shaped operands."""
        ...

    @abstractmethod
    def sub(self, a: ITensor, b: ITensor) -> ITensor:
        """Elementwise ``a - b`` for identically shaped operands."""
        ...

    @abstractmethod
    def mul(self, a: ITensor, b: ITensor) -> ITensor:
        """Elementwise ``a * b`` for identically shaped operands."""
        ...

    @abstractmethod
    def div(self, a: ITensor, b: ITensor) -> ITensor:
        """Elementwise ``a / b`` for identically shaped operands."""
        ...

    @abstractmethod
    def add_broadcast(self, a: ITensor, b: ITensor) -> ITensor:
        """Add a ``(k,)`` row vector `b` to every row of an ``(n, k)`` matrix `a`."""
        ...

    @abstractmethod
    def scale(self, a: ITensor, s: float) -> ITensor:
        """Multiply every element of `a` by the Python scalar `s`."""
        ...

    # ---- elementwise unary ----
    @abstractmethod
    def relu(self, a: ITensor) -> ITensor:
        """Elementwise ``max(0, a)``."""
        ...

    @abstractmethod
    def relu_backward(self, grad_out: ITensor, x: ITensor) -> ITensor:
        """Return `grad_out` where ``x > 0`` and zero elsewhere."""
        ...

    @abstractmethod
    def sigmoid(self, a: ITensor) -> ITensor:
        """Elementwise logistic function."""
        ...

    @abstractmethod
    def sigmoid_backward(self, grad_out: ITensor, out: ITensor) -> ITensor:
        """Return ``grad_out * out * (1 - out)`` where `out` is the forward output."""
        ...

    @abstractmethod
    def exp(self, a: ITensor) -> ITensor:
        """Elementwise natural exponential."""
        ...

    @abstractmethod
    def log(self, a: ITensor) -> ITensor:
        """Elementwise natural logarithm."""
        ...

    # ---- reductions ----
    @abstractmethod
    def sum(self, a: ITensor) -> ITensor:
        """Sum every element into a tensor of shape ``(1,)``."""
        ...

    @abstractmethod
    def sum_dim(self, a: ITensor, dim: int) -> ITensor:
        """Sum along `dim`, keeping it with size 1."""
        ...

    # ---- softmax ----
    @abstractmethod
    def softmax_last_dim(self, a: ITensor) -> ITensor:
        """Softmax along the last dimension; each row sums to 1."""
        ...

    @abstractmethod
    def log_softmax_last_dim(self, a: ITensor) -> ITensor:
        """Numerically stable ``log(softmax(a))`` along the last dimension."""
        ...

    @abstractmethod
    def softmax_backward(self, grad_out: ITensor, out: ITensor) -> ITensor:
        """Return ``out * (grad_out - sum(grad_out * out, last_dim))``."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = [IBackend.__name__]
