"""
Tensor interface definitions.

This module defines the domain-level interface for tensor-like objects using
structural typing. The interface captures the minimal, backend-agnostic
properties a value needs to flow through backends, ops and the graph:

- a `Shape`
- an element count consistent with that shape
- a way to read the values out as a NumPy-compatible array

Gradients are deliberately absent: in nodegrad a tensor is pure storage and
gradient accumulation lives on graph nodes and parameters.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ._shape import Shape


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` represents an owned, contiguous buffer of floating-point
    values together with a `Shape`.

    Notes
    -----
    - Implementations must guarantee ``len(buffer) == shape.numel``.
    - The protocol is read-oriented; mutation is reserved to the sanctioned
      paths (initializers, optimizer updates and gradient accumulation),
      which use concrete infrastructure methods.
    """

    @property
    def shape(self) -> Shape:
        """
        Return the shape of the tensor.

        Returns
        -------
        Shape
            The tensor's shape.
        """
        ...

    @property
    def numel(self) -> int:
        """
        Return the number of stored elements.

        Returns
        -------
        int
            Equal to ``shape.numel``.
        """
        ...

    def to_numpy(self) -> Any:
        """
        Return a shaped copy of the values.

        Returns
        -------
        numpy.ndarray
            A new array of shape ``shape.dims``.
        """
        ...
