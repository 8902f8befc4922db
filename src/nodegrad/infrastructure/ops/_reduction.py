"""
Full reductions to a single value.

Both ops produce shape ``(1,)`` and spread the incoming scalar gradient
uniformly back over the input.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ...domain._backend import IBackend
from ...domain._errors import ShapeMismatch
from ...domain._op import Op
from ...domain._shape import Shape
from ..tensor._tensor import Tensor

_SCALAR = Shape((1,))


class SumOp(Op):
    """``out = sum(x)``; ``grad = ones_like(x) * g``."""

    name = "sum"
    arity = 1

    def infer_shape(self, *shapes: Shape) -> Shape:
        return _SCALAR

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.sum(inputs[0])

    def backward(
        self,
        backend: IBackend,
        grad_out: Tensor,
        inputs: Sequence[Tensor],
        output: Tensor,
    ) -> Tuple[Tensor, ...]:
        return (backend.full(inputs[0].shape, grad_out.item()),)


class MeanOp(Op):
    """``out = sum(x) / numel``; ``grad = ones_like(x) * g / numel``."""

    name = "mean"
    arity = 1

    def infer_shape(self, *shapes: Shape) -> Shape:
        if shapes[0].numel == 0:
            raise ShapeMismatch(self.name, "a non-empty shape", shapes[0])
        return _SCALAR

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        x = inputs[0]
        return backend.scale(backend.sum(x), 1.0 / x.numel)

    def backward(self, backend, grad_out, inputs, output) -> Tuple[Tensor, ...]:
        x = inputs[0]
        return (backend.full(x.shape, grad_out.item() / x.numel),)
