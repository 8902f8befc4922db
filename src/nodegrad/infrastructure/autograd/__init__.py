"""
Graph construction, reverse-mode differentiation and gradient checking.
"""

from ._node import Node
from ._graph import Graph
from ._check import check_gradients, numerical_grad

__all__ = [
    Node.__name__,
    Graph.__name__,
    check_gradients.__name__,
    numerical_grad.__name__,
]
