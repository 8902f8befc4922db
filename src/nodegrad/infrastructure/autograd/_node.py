"""
Graph node records and node handles.

A graph stores its nodes in an arena (a list) of `_NodeRecord` entries.
Records refer to their inputs by arena index only, and every input index
is strictly smaller than the record's own index, so records never form
reference cycles and the arena order is already a topological order.

User code never touches records directly; it holds `Node` handles, which
pair a graph with an index and expose read-only views of the record.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ...domain._shape import Shape
from .._parameter import Parameter
from ..tensor._tensor import Tensor

if TYPE_CHECKING:
    from ._graph import Graph


@dataclass(eq=False)
class _NodeRecord:
    """
    Arena entry for one graph vertex.

    Attributes
    ----------
    op_name : Optional[str]
        Name of the producing op; None for leaves.
    inputs : tuple[int, ...]
        Arena indices of the inputs, in op argument order.
    value : Tensor
        Forward output (or the leaf's tensor).
    grad : Tensor
        Gradient accumulator with the same shape as `value`. For parameter
        leaves this is the parameter's own `grad` tensor.
    requires_grad : bool
        Whether gradients flow into this node.
    name : Optional[str]
        Debug label.
    parameter : Optional[Parameter]
        Bound parameter, for parameter leaves.
    """

    op_name: Optional[str]
    inputs: Tuple[int, ...]
    value: Tensor
    grad: Tensor
    requires_grad: bool
    name: Optional[str] = None
    parameter: Optional[Parameter] = None


class Node:
    """
    Handle to one vertex of a `Graph`.

    Handles are cheap ``(graph, index)`` pairs; two handles compare equal
    when they point at the same vertex of the same graph. Arithmetic
    operators forward to the owning graph's builders.
    """

    __slots__ = ("_graph", "_index")

    def __init__(self, graph: "Graph", index: int) -> None:
        self._graph = graph
        self._index = index

    @property
    def graph(self) -> "Graph":
        return self._graph

    @property
    def index(self) -> int:
        return self._index

    @property
    def _record(self) -> _NodeRecord:
        return self._graph._records[self._index]

    @property
    def value(self) -> Tensor:
        """Forward value of this node (shared, not copied)."""
        return self._record.value

    @property
    def grad(self) -> Tensor:
        """Gradient accumulator of this node."""
        return self._record.grad

    @property
    def shape(self) -> Shape:
        return self._record.value.shape

    @property
    def op_name(self) -> Optional[str]:
        return self._record.op_name

    @property
    def inputs(self) -> Tuple["Node", ...]:
        return tuple(Node(self._graph, i) for i in self._record.inputs)

    @property
    def requires_grad(self) -> bool:
        return self._record.requires_grad

    @property
    def is_leaf(self) -> bool:
        return self._record.op_name is None

    @property
    def name(self) -> Optional[str]:
        return self._record.name

    @property
    def parameter(self) -> Optional[Parameter]:
        return self._record.parameter

    def item(self) -> float:
        return self._record.value.item()

    def backward(self, seed: Optional[Tensor] = None) -> None:
        """Run a backward pass rooted at this node. See `Graph.backward`."""
        self._graph.backward(self, seed)

    # ---- operator sugar ----
    def __add__(self, other: "Node") -> "Node":
        return self._graph.add(self, other)

    def __sub__(self, other: "Node") -> "Node":
        return self._graph.sub(self, other)

    def __mul__(self, other: "Node") -> "Node":
        return self._graph.mul(self, other)

    def __matmul__(self, other: "Node") -> "Node":
        return self._graph.matmul(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._graph is other._graph and self._index == other._index

    def __hash__(self) -> int:
        return hash((id(self._graph), self._index))

    def __repr__(self) -> str:
        rec = self._record
        kind = rec.op_name or ("parameter" if rec.parameter is not None else "leaf")
        label = f", name={rec.name!r}" if rec.name else ""
        return (
            f"Node(index={self._index}, {kind}, shape={rec.value.shape.dims}, "
            f"requires_grad={rec.requires_grad}{label})"
        )
