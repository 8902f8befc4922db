"""
Module (model component) interface definitions.

This module defines the domain-level interface for model components using
structural subtyping via `typing.Protocol`.

The autograd engine only relies on two things from a model component:

- `forward` builds graph nodes from an input and returns the output node
- `parameters` lists the trainable leaves, in a stable order, so callers
  know which accumulators to reset and which values to update
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable

from ._parameter import IParameter


@runtime_checkable
class IModule(Protocol):
    """
    Domain-level module interface.

    Notes
    -----
    - Any object implementing both `forward` and `parameters` is considered
      a valid module.
    - `forward` accepts either a plain tensor (which starts a fresh graph)
      or a node of an existing graph, and returns a node.
    """

    def forward(self, x: Any) -> Any:
        """
        Execute the forward computation of the module.

        Parameters
        ----------
        x : ITensor | Node
            Input value.

        Returns
        -------
        Node
            Output node, attached to the same graph as the input.
        """
        ...

    def parameters(self) -> Iterable[IParameter]:
        """
        Return the trainable parameters of the module in a stable order.

        Returns
        -------
        Iterable[IParameter]
            The module's parameters (including those of child modules).
        """
        ...
