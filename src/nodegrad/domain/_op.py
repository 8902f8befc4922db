"""
Differentiable operator interface definitions.

This module defines the abstract base class for the differentiable
operations the autograd engine composes into graphs. A concrete `Op`
provides three things:

- shape inference from its input shapes
- the forward computation (inputs -> output tensor)
- the backward computation (output gradient -> one gradient per input)

Ops are stateless and identified by a stable `name`. They are made
available to graphs by registering an instance in an `OpRegistry`; the
traversal engine dispatches by name and never needs to know the concrete
op types, so new operators are added without touching the engine.

The design follows function-level autograd systems (e.g., PyTorch's
`autograd.Function`), with the forward output and inputs passed back to
`backward` explicitly instead of through a per-call context object.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Sequence, Tuple

from ._backend import IBackend
from ._errors import ShapeMismatch
from ._shape import Shape
from ._tensor import ITensor


class Op(ABC):
    """
    Abstract base class for differentiable operations.

    Subclasses set the class attributes `name` and `arity` and implement
    `infer_shape`, `forward` and `backward`.

    Contract
    --------
    - For fixed input shapes, `infer_shape` is deterministic and the tensor
      returned by `forward` has exactly the inferred shape.
    - `backward` returns, for each input, the partial derivative of the
      differentiated quantity with respect to that input, contracted with
      `grad_out` (chain rule). Each returned gradient has its input's shape.
    - Neither method mutates its arguments.

    Attributes
    ----------
    name : str
        Stable registry key (e.g., ``"matmul"``).
    arity : int
        Number of inputs the op consumes.
    """

    name: ClassVar[str] = ""
    arity: ClassVar[int] = 1

    @abstractmethod
    def infer_shape(self, *shapes: Shape) -> Shape:
        """
        Infer the output shape from the input shapes.

        Parameters
        ----------
        *shapes : Shape
            Input shapes, one per input, in call order.

        Returns
        -------
        Shape
            The shape `forward` will produce.

        Raises
        ------
        ShapeMismatch
            If the input shapes are incompatible with the op.
        """
        ...

    @abstractmethod
    def forward(self, backend: IBackend, inputs: Sequence[ITensor]) -> ITensor:
        """
        Compute the output tensor.

        Parameters
        ----------
        backend : IBackend
            Backend executing the numeric work.
        inputs : Sequence[ITensor]
            Input tensors, `arity` of them.

        Returns
        -------
        ITensor
            The output tensor.
        """
        ...

    @abstractmethod
    def backward(
        self,
        backend: IBackend,
        grad_out: ITensor,
        inputs: Sequence[ITensor],
        output: ITensor,
    ) -> Tuple[ITensor, ...]:
        """
        Compute gradients with respect to every input.

        Parameters
        ----------
        backend : IBackend
            Backend executing the numeric work.
        grad_out : ITensor
            Gradient of the differentiated quantity with respect to the
            output; has the output's shape.
        inputs : Sequence[ITensor]
            The tensors passed to `forward`.
        output : ITensor
            The tensor `forward` returned.

        Returns
        -------
        tuple[ITensor, ...]
            One gradient per input, in input order.
        """
        ...

    # ------------------------------------------------------------------
    # Helpers shared by concrete ops
    # ------------------------------------------------------------------
    def _require_same(self, a: Shape, b: Shape) -> Shape:
        """Return `a` if both shapes match, else raise `ShapeMismatch`."""
        if not a.same_as(b):
            raise ShapeMismatch(self.name, a, b)
        return a

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, arity={self.arity})"
