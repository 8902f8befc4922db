"""
Sequential container module.

`Sequential` composes child modules and applies them in order:

    y = L_n(...L_2(L_1(x)))

All children build onto the same graph: the first one receives the input
(a `Tensor` starts a fresh graph), each following one receives the
previous node.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple, Union

from .._determinism import DeterminismContext
from .._module import Module
from ..autograd._node import Node
from ..tensor._tensor import Tensor


class Sequential(Module):
    """
    Ordered container of modules.

    Parameters
    ----------
    *layers : Module
        Child modules, registered under ``"0"``, ``"1"``, ... in order.
    """

    def __init__(self, *layers: Module) -> None:
        super().__init__()
        self._layers: List[Module] = []
        for layer in layers:
            self.add(layer)

    def add(self, layer: Module, name: Optional[str] = None) -> None:
        """
        Append a module and register it as a submodule.

        Raises
        ------
        TypeError
            If `layer` is not a `Module`.
        ValueError
            If `name` is already taken.
        """
        if not isinstance(layer, Module):
            raise TypeError(f"Sequential.add expects a Module, got: {type(layer)}")

        layer_name = name if name is not None else str(len(self._layers))
        if layer_name in self._modules:
            raise ValueError(f"Duplicate layer name '{layer_name}' in Sequential.")

        self._layers.append(layer)
        self._modules[layer_name] = layer

    def reset_parameters(self, rng: Optional[DeterminismContext] = None) -> None:
        """Initialize every child that supports it, in layer order."""
        for layer in self._layers:
            reset = getattr(layer, "reset_parameters", None)
            if callable(reset):
                reset(rng)

    def forward(self, x: Union[Tensor, Node]) -> Node:
        out = self._as_node(x)
        for layer in self._layers:
            out = layer(out)
        return out

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[Module]:
        return iter(self._layers)

    def __getitem__(self, idx: int) -> Module:
        return self._layers[idx]

    def layers(self) -> Tuple[Module, ...]:
        """Return all layers as a tuple."""
        return tuple(self._layers)
