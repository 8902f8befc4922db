"""
Functional loss helpers.

These wrap the registered ``mse_loss`` and ``cross_entropy`` ops for the
common case where the target is a plain `Tensor`: the target enters the
prediction's graph as a constant leaf and receives no gradient.
"""

from __future__ import annotations

from typing import Union

from .autograd._node import Node
from .tensor._tensor import Tensor


def _target_node(pred: Node, target: Union[Tensor, Node]) -> Node:
    if isinstance(target, Node):
        return target
    return pred.graph.constant(target, name="target")


def mse_loss(pred: Node, target: Union[Tensor, Node]) -> Node:
    """
    Mean squared error ``sum((pred - target)^2) / N``.

    Parameters
    ----------
    pred : Node
        Prediction node.
    target : Tensor | Node
        Target of the same shape. A tensor is added as a constant.

    Returns
    -------
    Node
        Shape ``(1,)`` loss node.
    """
    return pred.graph.mse_loss(pred, _target_node(pred, target))


def cross_entropy(logits: Node, target: Union[Tensor, Node]) -> Node:
    """
    Batch-mean softmax cross-entropy of ``(B, C)`` logits against one-hot
    targets.
    """
    return logits.graph.cross_entropy(logits, _target_node(logits, target))
