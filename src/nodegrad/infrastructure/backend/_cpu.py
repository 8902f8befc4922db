"""
Reference CPU backend.

`CpuBackend` implements every `IBackend` operation with NumPy, single
threaded, and with a pinned reduction order:

- full and per-axis sums accumulate sequentially in index order
  ``0..n-1`` via ``numpy.add.accumulate`` rather than ``numpy.sum``
  (which uses pairwise summation)
- matrix products accumulate rank-1 updates ``out += a[:, k] (x) b[k, :]``
  for ``k = 0..K-1`` rather than calling BLAS, whose blocking and
  threading change the summation order between runs and machines

Elementwise operations have no ordering freedom and use plain NumPy
ufuncs. Identical inputs therefore produce bit-identical outputs.
"""

from __future__ import annotations

import numpy as np

from ...domain._backend import IBackend
from ...domain._errors import ShapeMismatch
from ...domain._shape import Shape, ShapeLike
from ..tensor._tensor import Tensor


def _seq_sum(arr: np.ndarray, axis: int) -> np.ndarray:
    """Sum `arr` along `axis` in index order, keeping the axis with size 1."""
    if arr.shape[axis] == 0:
        shape = list(arr.shape)
        shape[axis] = 1
        return np.zeros(shape, dtype=arr.dtype)
    acc = np.add.accumulate(arr, axis=axis)
    return np.take(acc, [arr.shape[axis] - 1], axis=axis)


class CpuBackend(IBackend):
    """
    Deterministic NumPy implementation of the backend capability set.

    Notes
    -----
    - Stateless; a single instance may be shared by any number of graphs.
    - Every operation validates operand shapes before computing and
      raises `ShapeMismatch` on incompatibility.
    """

    name = "cpu"
    deterministic = True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _same(op: str, a: Tensor, b: Tensor) -> None:
        if not a.shape.same_as(b.shape):
            raise ShapeMismatch(op, a.shape, b.shape)

    @staticmethod
    def _rank2(op: str, a: Tensor) -> None:
        if a.shape.rank != 2:
            raise ShapeMismatch(op, "a rank-2 shape", a.shape)

    @staticmethod
    def _nd(a: Tensor) -> np.ndarray:
        return a._raw().reshape(a.shape.dims)

    @staticmethod
    def _out(shape: ShapeLike, arr: np.ndarray) -> Tensor:
        return Tensor._wrap(Shape.of(shape), arr)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    def zeros(self, shape: ShapeLike) -> Tensor:
        return Tensor.zeros(shape)

    def ones(self, shape: ShapeLike) -> Tensor:
        return Tensor.ones(shape)

    def full(self, shape: ShapeLike, value: float) -> Tensor:
        return Tensor.full(shape, value)

    # ------------------------------------------------------------------
    # Linear algebra
    # ------------------------------------------------------------------
    def matmul(self, a: Tensor, b: Tensor) -> Tensor:
        self._rank2("matmul", a)
        self._rank2("matmul", b)
        m, k = a.shape.dims
        k2, n = b.shape.dims
        if k != k2:
            raise ShapeMismatch(
                "matmul",
                (k, n),
                b.shape,
                detail=f"left operand is {a.shape.dims}, inner dimensions differ",
            )

        A = self._nd(a)
        B = self._nd(b)
        out = np.zeros((m, n), dtype=np.float64)
        for i in range(k):
            out += A[:, i : i + 1] * B[i : i + 1, :]
        return self._out((m, n), out)

    def transpose(self, a: Tensor) -> Tensor:
        self._rank2("transpose", a)
        m, n = a.shape.dims
        return self._out((n, m), self._nd(a).T.copy())

    # ------------------------------------------------------------------
    # Elementwise binary
    # ------------------------------------------------------------------
    def add(self, a: Tensor, b: Tensor) -> Tensor:
        self._same("add", a, b)
        return self._out(a.shape, a._raw() + b._raw())

    def sub(self, a: Tensor, b: Tensor) -> Tensor:
        self._same("sub", a, b)
        return self._out(a.shape, a._raw() - b._raw())

    def mul(self, a: Tensor, b: Tensor) -> Tensor:
        self._same("mul", a, b)
        return self._out(a.shape, a._raw() * b._raw())

    def div(self, a: Tensor, b: Tensor) -> Tensor:
        self._same("div", a, b)
        with np.errstate(divide="ignore", invalid="ignore"):
            return self._out(a.shape, a._raw() / b._raw())

    def add_broadcast(self, a: Tensor, b: Tensor) -> Tensor:
        self._rank2("add_broadcast", a)
        cols = a.shape[1]
        if not b.shape.same_as((cols,)):
            raise ShapeMismatch("add_broadcast", (cols,), b.shape)
        return self._out(a.shape, self._nd(a) + b._raw()[np.newaxis, :])

    def scale(self, a: Tensor, s: float) -> Tensor:
        return self._out(a.shape, a._raw() * float(s))

    # ------------------------------------------------------------------
    # Elementwise unary
    # ------------------------------------------------------------------
    def relu(self, a: Tensor) -> Tensor:
        return self._out(a.shape, np.maximum(a._raw(), 0.0))

    def relu_backward(self, grad_out: Tensor, x: Tensor) -> Tensor:
        self._same("relu_backward", x, grad_out)
        return self._out(x.shape, np.where(x._raw() > 0.0, grad_out._raw(), 0.0))

    def sigmoid(self, a: Tensor) -> Tensor:
        x = a._raw()
        # split by sign so exp never overflows
        out = np.empty_like(x)
        pos = x >= 0.0
        out[pos] = 1.0 / (1.0 + np.exp(-x[pos]))
        ex = np.exp(x[~pos])
        out[~pos] = ex / (1.0 + ex)
        return self._out(a.shape, out)

    def sigmoid_backward(self, grad_out: Tensor, out: Tensor) -> Tensor:
        self._same("sigmoid_backward", out, grad_out)
        y = out._raw()
        return self._out(out.shape, grad_out._raw() * y * (1.0 - y))

    def exp(self, a: Tensor) -> Tensor:
        return self._out(a.shape, np.exp(a._raw()))

    def log(self, a: Tensor) -> Tensor:
        with np.errstate(divide="ignore", invalid="ignore"):
            return self._out(a.shape, np.log(a._raw()))

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------
    def sum(self, a: Tensor) -> Tensor:
        flat = a._raw()
        total = np.add.accumulate(flat)[-1] if flat.size else 0.0
        return self._out((1,), np.array([total], dtype=np.float64))

    def sum_dim(self, a: Tensor, dim: int) -> Tensor:
        rank = a.shape.rank
        if rank == 0 or not (-rank <= dim < rank):
            raise ShapeMismatch(
                "sum_dim", f"a dimension in [-{rank}, {rank})", a.shape,
                detail=f"dim={dim}",
            )
        dim = dim % rank
        out = _seq_sum(self._nd(a), dim)
        return self._out(out.shape, out)

    # ------------------------------------------------------------------
    # Softmax
    # ------------------------------------------------------------------
    def softmax_last_dim(self, a: Tensor) -> Tensor:
        if a.shape.rank == 0:
            raise ShapeMismatch("softmax", "rank >= 1", a.shape)
        x = self._nd(a)
        if x.size == 0:
            return self._out(a.shape, x.copy())
        shifted = x - np.max(x, axis=-1, keepdims=True)
        e = np.exp(shifted)
        return self._out(a.shape, e / _seq_sum(e, x.ndim - 1))

    def log_softmax_last_dim(self, a: Tensor) -> Tensor:
        if a.shape.rank == 0:
            raise ShapeMismatch("log_softmax", "rank >= 1", a.shape)
        x = self._nd(a)
        if x.size == 0:
            return self._out(a.shape, x.copy())
        shifted = x - np.max(x, axis=-1, keepdims=True)
        lse = np.log(_seq_sum(np.exp(shifted), x.ndim - 1))
        return self._out(a.shape, shifted - lse)

    def softmax_backward(self, grad_out: Tensor, out: Tensor) -> Tensor:
        self._same("softmax_backward", out, grad_out)
        if out.shape.rank == 0:
            raise ShapeMismatch("softmax_backward", "rank >= 1", out.shape)
        y = self._nd(out)
        g = self._nd(grad_out)
        if y.size == 0:
            return self._out(out.shape, y.copy())
        dot = _seq_sum(g * y, y.ndim - 1)
        return self._out(out.shape, y * (g - dot))
