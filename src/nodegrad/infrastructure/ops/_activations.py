"""
Unary elementwise ops and row softmax.

Each op's backward reuses what the forward already produced where the
derivative allows it (sigmoid, exp and softmax differentiate through their
output; relu and log through their input).
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ...domain._backend import IBackend
from ...domain._errors import ShapeMismatch
from ...domain._op import Op
from ...domain._shape import Shape
from ..tensor._tensor import Tensor


class _UnaryOp(Op):
    """Shape-preserving single-input op."""

    arity = 1

    def infer_shape(self, *shapes: Shape) -> Shape:
        return shapes[0]


class ReLUOp(_UnaryOp):
    """
    ``out = max(0, x)``.

    The derivative at exactly 0 is taken as 0.
    """

    name = "relu"

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.relu(inputs[0])

    def backward(self, backend, grad_out, inputs, output) -> Tuple[Tensor, ...]:
        return (backend.relu_backward(grad_out, inputs[0]),)


class SigmoidOp(_UnaryOp):
    """``out = 1 / (1 + exp(-x))``; ``grad = g * out * (1 - out)``."""

    name = "sigmoid"

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.sigmoid(inputs[0])

    def backward(self, backend, grad_out, inputs, output) -> Tuple[Tensor, ...]:
        return (backend.sigmoid_backward(grad_out, output),)


class ExpOp(_UnaryOp):
    """``out = exp(x)``; ``grad = g * out``."""

    name = "exp"

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.exp(inputs[0])

    def backward(self, backend, grad_out, inputs, output) -> Tuple[Tensor, ...]:
        return (backend.mul(grad_out, output),)


class LogOp(_UnaryOp):
    """``out = ln(x)``; ``grad = g / x``."""

    name = "log"

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.log(inputs[0])

    def backward(self, backend, grad_out, inputs, output) -> Tuple[Tensor, ...]:
        return (backend.div(grad_out, inputs[0]),)


class SoftmaxOp(_UnaryOp):
    """
    Softmax over the last dimension.

    Backward: ``grad = y * (g - sum(g * y, last_dim))`` with ``y`` the
    forward output.
    """

    name = "softmax"

    def infer_shape(self, *shapes: Shape) -> Shape:
        if shapes[0].rank == 0:
            raise ShapeMismatch(self.name, "rank >= 1", shapes[0])
        return shapes[0]

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.softmax_last_dim(inputs[0])

    def backward(self, backend, grad_out, inputs, output) -> Tuple[Tensor, ...]:
        return (backend.softmax_backward(grad_out, output),)
