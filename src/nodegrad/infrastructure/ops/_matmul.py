"""
Matrix multiplication op.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ...domain._backend import IBackend
from ...domain._errors import ShapeMismatch
from ...domain._op import Op
from ...domain._shape import Shape
from ..tensor._tensor import Tensor


class MatMulOp(Op):
    """
    2-D matrix product ``(m, k) @ (k, n) -> (m, n)``.

    Backward
    --------
    With ``g = dL/dout``:

        grad_a = g @ b^T        (m, k)
        grad_b = a^T @ g        (k, n)

    Notes
    -----
    Shape validation happens in `infer_shape` before any computation, so an
    incompatible pair never reaches the backend.
    """

    name = "matmul"
    arity = 2

    def infer_shape(self, *shapes: Shape) -> Shape:
        a, b = shapes[0], shapes[1]
        if a.rank != 2:
            raise ShapeMismatch(self.name, "a rank-2 left operand", a)
        if b.rank != 2:
            raise ShapeMismatch(self.name, "a rank-2 right operand", b)
        if a[1] != b[0]:
            raise ShapeMismatch(
                self.name,
                (a[1], b[1]),
                b,
                detail=f"left operand is {a.dims}, inner dimensions differ",
            )
        return Shape((a[0], b[1]))

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        return backend.matmul(inputs[0], inputs[1])

    def backward(
        self,
        backend: IBackend,
        grad_out: Tensor,
        inputs: Sequence[Tensor],
        output: Tensor,
    ) -> Tuple[Tensor, ...]:
        a, b = inputs
        grad_a = backend.matmul(grad_out, backend.transpose(b))
        grad_b = backend.matmul(backend.transpose(a), grad_out)
        return grad_a, grad_b
