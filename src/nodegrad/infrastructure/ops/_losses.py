"""
Loss ops.

Both losses take a prediction and a same-shaped target and reduce to shape
``(1,)``. Gradients are returned for both inputs; when the target enters
the graph as a constant, the engine simply does not propagate its share.
"""

from __future__ import annotations

from typing import Sequence, Tuple

from ...domain._backend import IBackend
from ...domain._errors import ShapeMismatch
from ...domain._op import Op
from ...domain._shape import Shape
from ..tensor._tensor import Tensor

_SCALAR = Shape((1,))


class MSELossOp(Op):
    """
    Mean squared error.

    Forward::

        L = sum((pred - target)^2) / N

    Backward (``g`` is the incoming scalar gradient)::

        dL/dpred   =  2 * (pred - target) / N * g
        dL/dtarget = -2 * (pred - target) / N * g
    """

    name = "mse_loss"
    arity = 2

    def infer_shape(self, *shapes: Shape) -> Shape:
        pred = self._require_same(shapes[0], shapes[1])
        if pred.numel == 0:
            raise ShapeMismatch(self.name, "a non-empty shape", pred)
        return _SCALAR

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        pred, target = inputs
        diff = backend.sub(pred, target)
        return backend.scale(backend.sum(backend.mul(diff, diff)), 1.0 / pred.numel)

    def backward(
        self,
        backend: IBackend,
        grad_out: Tensor,
        inputs: Sequence[Tensor],
        output: Tensor,
    ) -> Tuple[Tensor, ...]:
        pred, target = inputs
        diff = backend.sub(pred, target)
        k = 2.0 * grad_out.item() / pred.numel
        return backend.scale(diff, k), backend.scale(diff, -k)


class CrossEntropyOp(Op):
    """
    Softmax cross-entropy against one-hot (or soft) targets.

    Inputs are ``(B, C)`` logits and a ``(B, C)`` target distribution.

    Forward::

        L = -(1/B) * sum_{i,j} target[i, j] * log_softmax(logits)[i, j]

    Backward::

        dL/dlogits = (softmax(logits) * rowsum(target) - target) / B * g
        dL/dtarget = -log_softmax(logits) / B * g

    With one-hot targets ``rowsum(target)`` is 1 and the logits gradient
    reduces to ``(softmax(logits) - target) / B * g``.
    """

    name = "cross_entropy"
    arity = 2

    def infer_shape(self, *shapes: Shape) -> Shape:
        logits = self._require_same(shapes[0], shapes[1])
        if logits.rank != 2 or logits[0] == 0:
            raise ShapeMismatch(self.name, "a non-empty (batch, classes) shape", logits)
        return _SCALAR

    def forward(self, backend: IBackend, inputs: Sequence[Tensor]) -> Tensor:
        logits, target = inputs
        log_p = backend.log_softmax_last_dim(logits)
        total = backend.sum(backend.mul(target, log_p))
        return backend.scale(total, -1.0 / logits.shape[0])

    def backward(self, backend, grad_out, inputs, output) -> Tuple[Tensor, ...]:
        logits, target = inputs
        batch, classes = logits.shape.dims
        k = grad_out.item() / batch
        probs = backend.softmax_last_dim(logits)
        # (B, 1) @ (1, C) spreads each row sum across its row
        row_mass = backend.matmul(
            backend.sum_dim(target, -1), backend.ones((1, classes))
        )
        grad_logits = backend.scale(
            backend.sub(backend.mul(probs, row_mass), target), k
        )
        grad_target = backend.scale(backend.log_softmax_last_dim(logits), -k)
        return grad_logits, grad_target
