"""
Linear (fully-connected) layer.

Performs an affine projection of 2-D, batch-major inputs:

    y = x @ W + b

Shape conventions
-----------------
- x : (batch, in_features)
- W : (in_features, out_features)
- b : (out_features,)
- y : (batch, out_features)

The projection is built from the registered ``matmul`` and
``add_broadcast`` ops, so its gradients come from the autograd engine.

Parameter initialization
------------------------
Parameters are declared shape-only. They are initialized by
`reset_parameters(rng)` (Xavier uniform weight, zero bias), which the
constructor calls when given an `rng`. Running `forward` on an
uninitialized layer raises `UninitializedParameter`.
"""

from __future__ import annotations

from typing import Optional, Union

from ._determinism import DeterminismContext
from ._module import Module
from ._parameter import Parameter
from .autograd._node import Node
from .tensor._tensor import Tensor
from .utils.weight_initializer import WeightInitializer


class Linear(Module):
    """
    Fully-connected layer ``y = x @ W + b``.

    Parameters
    ----------
    in_features : int
        Size of each input row.
    out_features : int
        Size of each output row.
    rng : DeterminismContext, optional
        When given, parameters are initialized immediately from it.
    initializer : str, optional
        Registry name of the weight initializer. Defaults to
        ``"xavier_uniform"``.
    """

    def __init__(
        self,
        in_features: int,
        out_features: int,
        *,
        rng: Optional[DeterminismContext] = None,
        initializer: str = "xavier_uniform",
    ) -> None:
        super().__init__()
        if in_features <= 0 or out_features <= 0:
            raise ValueError(
                "in_features and out_features must be positive, got "
                f"{in_features} and {out_features}"
            )
        self.in_features = int(in_features)
        self.out_features = int(out_features)
        self._init = WeightInitializer(initializer)

        self.weight = Parameter((self.in_features, self.out_features))
        self.bias = Parameter((self.out_features,))

        if rng is not None:
            self.reset_parameters(rng)

    def reset_parameters(self, rng: Optional[DeterminismContext] = None) -> None:
        """
        (Re)initialize weight and bias.

        Draws exactly ``in_features * out_features`` values from `rng` for
        the weight; the bias is zero-filled without drawing.
        """
        self._init(self.weight, rng=rng)
        WeightInitializer("zeros")(self.bias)

    def forward(self, x: Union[Tensor, Node]) -> Node:
        """
        Apply the affine projection.

        Parameters
        ----------
        x : Tensor | Node
            ``(batch, in_features)`` input.

        Returns
        -------
        Node
            ``(batch, out_features)`` output node.
        """
        node = self._as_node(x)
        g = node.graph
        w = g.parameter(self.weight)
        b = g.parameter(self.bias)
        return g.add_broadcast(g.matmul(node, w), b)

    def extra_repr(self) -> str:
        return f"in_features={self.in_features}, out_features={self.out_features}"
