"""
Elementwise arithmetic ops.

Binary ops here require identically shaped operands, except
`AddBroadcastOp`, which adds a ``(k,)`` bias row to every row of an
``(n, k)`` matrix.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ...domain._backend import IBackend
from ...domain._errors import ShapeMismatch
from ...domain._op import Op
from ...domain._shape import Shape
from ..tensor._tensor import Tensor


class AddOp(Op):
    """``out = a + b``; both inputs receive `grad_out` unchanged."""

    name = "add"
    arity = 2

    def infer_shape(self, *shapes: Shape) -> Shape:
        return self._require_same(shapes[0], shapes[1])

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.add(inputs[0], inputs[1])

    def backward(
        self,
        backend: IBackend,
        grad_out: Tensor,
        inputs: Sequence[Tensor],
        output: Tensor,
    ) -> Tuple[Tensor, ...]:
        return grad_out.clone(), grad_out.clone()


class SubOp(Op):
    """``out = a - b``; gradients are ``(g, -g)``."""

    name = "sub"
    arity = 2

    def infer_shape(self, *shapes: Shape) -> Shape:
        return self._require_same(shapes[0], shapes[1])

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.sub(inputs[0], inputs[1])

    def backward(self, backend, grad_out, inputs, output):
        return grad_out.clone(), backend.scale(grad_out, -1.0)


class MulOp(Op):
    """``out = a * b`` (Hadamard); gradients are ``(g * b, g * a)``."""

    name = "mul"
    arity = 2

    def infer_shape(self, *shapes: Shape) -> Shape:
        return self._require_same(shapes[0], shapes[1])

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.mul(inputs[0], inputs[1])

    def backward(self, backend, grad_out, inputs, output):
        a, b = inputs
        return backend.mul(grad_out, b), backend.mul(grad_out, a)


class AddBroadcastOp(Op):
    """
    Row-bias addition: ``out[i, j] = a[i, j] + b[j]``.

    Backward
    --------
    - ``grad_a = g``
    - ``grad_b = sum over rows of g``, shape ``(k,)``
    """

    name = "add_broadcast"
    arity = 2

    def infer_shape(self, *shapes: Shape) -> Shape:
        a, b = shapes[0], shapes[1]
        if a.rank != 2:
            raise ShapeMismatch(self.name, "a rank-2 shape", a)
        if not b.same_as((a[1],)):
            raise ShapeMismatch(self.name, (a[1],), b)
        return a

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.add_broadcast(inputs[0], inputs[1])

    def backward(self, backend, grad_out, inputs, output):
        bias = inputs[1]
        summed = backend.sum_dim(grad_out, 0)
        # (1, k) -> (k,)
        grad_b = Tensor(bias.shape, summed)
        return grad_out.clone(), grad_b
