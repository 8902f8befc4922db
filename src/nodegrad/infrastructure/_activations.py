"""
Module-based activation layers.

Thin `Module` wrappers around the registered activation ops, so
activations compose with layers inside containers such as `Sequential`.
They hold no parameters.
"""

from __future__ import annotations

from typing import Union

from ._module import Module
from .autograd._node import Node
from .tensor._tensor import Tensor


class ReLU(Module):
    """Elementwise ``max(0, x)``."""

    def forward(self, x: Union[Tensor, Node]) -> Node:
        node = self._as_node(x)
        return node.graph.relu(node)


class Sigmoid(Module):
    """Elementwise ``1 / (1 + exp(-x))``."""

    def forward(self, x: Union[Tensor, Node]) -> Node:
        node = self._as_node(x)
        return node.graph.sigmoid(node)


class Softmax(Module):
    """Softmax over the last dimension."""

    def forward(self, x: Union[Tensor, Node]) -> Node:
        node = self._as_node(x)
        return node.graph.softmax(node)
