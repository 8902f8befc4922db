"""
Infrastructure module base class.

This module provides a concrete `Module` implementation that satisfies the
domain-level `IModule` protocol. It implements the conveniences shared by
model components:

- parameter and submodule registration (explicit or by attribute assignment)
- recursive parameter traversal (`parameters`, `named_parameters`)
- `__call__` forwarding to `forward`
- entering the autograd engine: `forward` accepts a plain `Tensor`, which
  starts a fresh `Graph`, or a `Node` of an existing graph
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..domain._module import IModule
from ._parameter import Parameter, zero_grad
from .autograd._graph import Graph
from .autograd._node import Node
from .tensor._tensor import Tensor


class Module(IModule):
    """
    Infrastructure base class for model components.

    Subclasses typically:
    - create `Parameter` instances and assign them as attributes,
    - implement `forward` to build graph nodes.

    Attributes
    ----------
    _parameters : Dict[str, Parameter]
        Parameters registered directly on this module, in assignment order.
    _modules : Dict[str, Module]
        Child modules, in assignment order.

    Notes
    -----
    - Assigning a `Parameter` or `Module` to an attribute registers it.
      Assigning None to a registered name unregisters it.
    - `parameters()` yields own parameters first, then each child's, so the
      order is stable across calls.
    """

    def __init__(self) -> None:
        # Use super().__setattr__ to avoid triggering our __setattr__ logic.
        super().__setattr__("_parameters", {})
        super().__setattr__("_modules", {})

    def __setattr__(self, name: str, value) -> None:
        if name in {"_parameters", "_modules"}:
            super().__setattr__(name, value)
            return

        if value is None:
            self._parameters.pop(name, None)
            self._modules.pop(name, None)
        elif isinstance(value, Parameter):
            if value.name is None:
                value.name = name
            self._parameters[name] = value
        elif isinstance(value, Module):
            self._modules[name] = value

        super().__setattr__(name, value)

    def register_parameter(self, name: str, param: Optional[Parameter]) -> None:
        """
        Register a parameter with this module.

        Parameters
        ----------
        name : str
            Name under which the parameter will be stored.
        param : Optional[Parameter]
            Parameter instance to register. If None, registration is skipped.
        """
        if param is None:
            return
        self._parameters[name] = param
        super().__setattr__(name, param)

    def register_module(self, name: str, module: Optional["Module"]) -> None:
        """
        Register a child module with this module.

        Parameters
        ----------
        name : str
            Name under which the module will be stored.
        module : Optional[Module]
            Child module to register. If None, registration is skipped.
        """
        if module is None:
            return
        self._modules[name] = module
        super().__setattr__(name, module)

    def parameters(self) -> List[Parameter]:
        """
        Return this module's parameters, then those of every submodule.

        Returns
        -------
        list[Parameter]
            Parameters in a stable order.
        """
        out: List[Parameter] = list(self._parameters.values())
        for m in self._modules.values():
            out.extend(m.parameters())
        return out

    def named_parameters(self, prefix: str = "") -> Iterator[Tuple[str, Parameter]]:
        """
        Return an iterator over (name, parameter) pairs (recursive).

        Parameters
        ----------
        prefix : str
            Prefix to prepend to parameter names (used for recursion).
        """
        base = prefix + "." if prefix else ""

        for name, p in self._parameters.items():
            yield (f"{base}{name}", p)

        for child_name, child in self._modules.items():
            yield from child.named_parameters(f"{base}{child_name}")

    def zero_grad(self) -> None:
        """Reset the gradient accumulator of every parameter."""
        zero_grad(self.parameters())

    @staticmethod
    def _as_node(x: Union[Tensor, Node]) -> Node:
        """
        Return `x` if it is a node, otherwise a constant leaf of a new graph.
        """
        if isinstance(x, Node):
            return x
        if isinstance(x, Tensor):
            return Graph().constant(x, name="input")
        raise TypeError(f"Expected a Tensor or Node, got {type(x).__name__}")

    def forward(self, x: Union[Tensor, Node]) -> Node:
        """
        Execute the forward computation of the module.

        Subclasses must implement this.
        """
        raise NotImplementedError

    def __call__(self, x: Union[Tensor, Node]) -> Node:
        return self.forward(x)

    def extra_repr(self) -> str:
        return ""

    def __repr__(self) -> str:
        children = "".join(
            f"\n  ({n}): " + repr(m).replace("\n", "\n  ")
            for n, m in self._modules.items()
        )
        head = f"{type(self).__name__}({self.extra_repr()}"
        return f"{head}{children}\n)" if children else f"{head})"
