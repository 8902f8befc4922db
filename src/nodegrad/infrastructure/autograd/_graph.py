"""
Computation graph construction and reverse-mode differentiation.

A `Graph` is built lazily during forward evaluation: every `apply` call
runs one registered op and appends a node recording the op name, the input
indices and the output tensor. `backward` then walks the part of the graph
reachable from a root in reverse topological order and accumulates
gradients into every node that requires them.

Traversal
---------
Inputs always have smaller arena indices than their consumers, so once the
reachable subgraph is collected (iteratively, with an explicit stack), a
descending scan over the collected indices visits each node after all of
its consumers. No recursion is involved at any point; chains of arbitrary
depth are fine.

Failure atomicity
-----------------
Gradients of a pass are gathered in a pass-local buffer and added into the
node accumulators (and thereby into bound parameters) only once every op
backward has succeeded. A failing pass raises and leaves all accumulators
as they were.

Stale gradients
---------------
A backward pass about to add into a parameter gradient that an optimizer
step already consumed (no `zero_grad()` since) emits
`StaleGradientWarning`, or raises `StaleGradientError` in strict mode
before anything is committed.
"""

from __future__ import annotations

import warnings
from typing import Dict, Iterator, List, Optional, Sequence, Set, Union

from ...domain._backend import IBackend
from ...domain._errors import (
    BackwardError,
    GradientShapeError,
    ShapeMismatch,
    StaleGradientError,
    StaleGradientWarning,
)
from .._config import get_config
from .._parameter import Parameter
from ..backend import get_backend
from ..ops._registry import OpRegistry, default_registry
from ..tensor._tensor import Tensor
from ._node import Node, _NodeRecord


class Graph:
    """
    Arena-backed DAG of nodes.

    Parameters
    ----------
    registry : OpRegistry, optional
        Registry ops are resolved from. Defaults to `default_registry()`.
    backend : IBackend or str, optional
        Backend instance, or the name of a registered backend. Defaults to
        the configured ``NODEGRAD_BACKEND``.
    strict_gradients : bool, optional
        Raise instead of warn on stale parameter gradients. Defaults to the
        configured ``NODEGRAD_STRICT_GRADIENTS``.
    """

    def __init__(
        self,
        *,
        registry: Optional[OpRegistry] = None,
        backend: Union[IBackend, str, None] = None,
        strict_gradients: Optional[bool] = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry()
        if isinstance(backend, IBackend):
            self._backend = backend
        else:
            self._backend = get_backend(backend)
        if strict_gradients is None:
            strict_gradients = get_config().strict_gradients
        self._strict = bool(strict_gradients)
        self._records: List[_NodeRecord] = []
        self._param_leaves: Dict[int, int] = {}

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def registry(self) -> OpRegistry:
        return self._registry

    @property
    def backend(self) -> IBackend:
        return self._backend

    @property
    def strict_gradients(self) -> bool:
        return self._strict

    def node(self, index: int) -> Node:
        """Return a handle to the node at arena `index`."""
        if not 0 <= index < len(self._records):
            raise IndexError(f"node index {index} out of range")
        return Node(self, index)

    def nodes(self) -> Iterator[Node]:
        """Iterate over handles to every node, in arena order."""
        for i in range(len(self._records)):
            yield Node(self, i)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._records)}, backend={self._backend.name!r})"

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------
    def _append(self, record: _NodeRecord) -> Node:
        self._records.append(record)
        return Node(self, len(self._records) - 1)

    def variable(
        self, tensor: Tensor, requires_grad: bool = True, *, name: Optional[str] = None
    ) -> Node:
        """
        Add an input leaf holding `tensor` (by reference).

        Its gradient is collected in the node's own accumulator.
        """
        if not isinstance(tensor, Tensor):
            raise TypeError(f"Expected a Tensor, got {type(tensor).__name__}")
        return self._append(
            _NodeRecord(
                op_name=None,
                inputs=(),
                value=tensor,
                grad=Tensor.zeros(tensor.shape),
                requires_grad=bool(requires_grad),
                name=name,
            )
        )

    def constant(self, tensor: Tensor, *, name: Optional[str] = None) -> Node:
        """Add a leaf that never receives gradients."""
        return self.variable(tensor, requires_grad=False, name=name)

    def parameter(self, param: Parameter) -> Node:
        """
        Bind `param` as a leaf.

        The leaf shares the parameter's value and gradient tensors. Binding
        the same parameter twice returns the same node.

        Raises
        ------
        UninitializedParameter
            If the parameter has no value yet.
        """
        cached = self._param_leaves.get(id(param))
        if cached is not None:
            return Node(self, cached)

        node = self._append(
            _NodeRecord(
                op_name=None,
                inputs=(),
                value=param.value,
                grad=param.grad,
                requires_grad=param.requires_grad,
                name=param.name,
                parameter=param,
            )
        )
        self._param_leaves[id(param)] = node.index
        return node

    # ------------------------------------------------------------------
    # Forward
    # ------------------------------------------------------------------
    def _check_owned(self, node: object) -> Node:
        if not isinstance(node, Node):
            raise TypeError(f"Expected a Node, got {type(node).__name__}")
        if node.graph is not self:
            raise ValueError(f"{node!r} belongs to a different graph")
        return node

    def apply(self, op_name: str, *inputs: Node, name: Optional[str] = None) -> Node:
        """
        Run the op registered as `op_name` on `inputs` and record the result.

        Parameters
        ----------
        op_name : str
            Registry key of the op.
        *inputs : Node
            Input nodes of this graph, `arity` of them.
        name : str, optional
            Debug label for the new node.

        Returns
        -------
        Node
            Handle to the new node.

        Raises
        ------
        UnregisteredOp
            If `op_name` is not registered. No node is added.
        TypeError
            If the number of inputs differs from the op's arity.
        ValueError
            If an input belongs to another graph.
        ShapeMismatch
            If the input shapes are incompatible with the op.
        """
        op = self._registry.get(op_name)
        if len(inputs) != op.arity:
            raise TypeError(
                f"op {op_name!r} takes {op.arity} input(s), got {len(inputs)}"
            )
        for n in inputs:
            self._check_owned(n)

        in_records = [self._records[n.index] for n in inputs]
        in_values = [r.value for r in in_records]

        out_shape = op.infer_shape(*(v.shape for v in in_values))
        out = op.forward(self._backend, in_values)
        if not out.shape.same_as(out_shape):
            raise ShapeMismatch(
                op_name, out_shape, out.shape, detail="forward output shape"
            )

        return self._append(
            _NodeRecord(
                op_name=op_name,
                inputs=tuple(n.index for n in inputs),
                value=out,
                grad=Tensor.zeros(out_shape),
                requires_grad=any(r.requires_grad for r in in_records),
                name=name,
            )
        )

    # ---- convenience builders ----
    def add(self, a: Node, b: Node) -> Node:
        return self.apply("add", a, b)

    def sub(self, a: Node, b: Node) -> Node:
        return self.apply("sub", a, b)

    def mul(self, a: Node, b: Node) -> Node:
        return self.apply("mul", a, b)

    def add_broadcast(self, a: Node, bias: Node) -> Node:
        return self.apply("add_broadcast", a, bias)

    def matmul(self, a: Node, b: Node) -> Node:
        return self.apply("matmul", a, b)

    def relu(self, x: Node) -> Node:
        return self.apply("relu", x)

    def sigmoid(self, x: Node) -> Node:
        return self.apply("sigmoid", x)

    def exp(self, x: Node) -> Node:
        return self.apply("exp", x)

    def log(self, x: Node) -> Node:
        return self.apply("log", x)

    def softmax(self, x: Node) -> Node:
        return self.apply("softmax", x)

    def sum(self, x: Node) -> Node:
        return self.apply("sum", x)

    def mean(self, x: Node) -> Node:
        return self.apply("mean", x)

    def mse_loss(self, pred: Node, target: Node) -> Node:
        return self.apply("mse_loss", pred, target)

    def cross_entropy(self, logits: Node, target: Node) -> Node:
        return self.apply("cross_entropy", logits, target)

    # ------------------------------------------------------------------
    # Backward
    # ------------------------------------------------------------------
    def _reachable(self, root: int) -> Set[int]:
        """Indices of requires-grad nodes reachable from `root`."""
        seen: Set[int] = set()
        stack = [root]
        while stack:
            i = stack.pop()
            if i in seen:
                continue
            seen.add(i)
            for j in self._records[i].inputs:
                if j not in seen and self._records[j].requires_grad:
                    stack.append(j)
        return seen

    def backward(self, root: Node, seed: Optional[Tensor] = None) -> None:
        """
        Accumulate gradients of `root` into every reachable node.

        Parameters
        ----------
        root : Node
            Node to differentiate.
        seed : Tensor, optional
            Gradient of the differentiated quantity with respect to `root`.
            Defaults to ones of the root's shape.

        Raises
        ------
        GradientShapeError
            If `seed` does not match the root's shape, or an op backward
            returns a gradient of the wrong shape (or count).
        BackwardError
            If an op backward raises. The original exception is chained.
        StaleGradientError
            In strict mode, if a reached parameter still holds a gradient
            consumed by an optimizer step.

        Notes
        -----
        - Gradients are *added* to existing accumulator contents.
        - Nothing is committed unless the whole pass succeeds.
        - A root that does not require gradients makes this a no-op.
        """
        self._check_owned(root)
        root_rec = self._records[root.index]
        if seed is None:
            seed = self._backend.ones(root_rec.value.shape)
        elif not seed.shape.same_as(root_rec.value.shape):
            raise GradientShapeError(
                root_rec.value.shape, seed.shape, node_index=root.index, detail="seed"
            )

        if not root_rec.requires_grad:
            return

        reachable = self._reachable(root.index)
        pending: Dict[int, Tensor] = {root.index: seed.clone()}

        for i in sorted(reachable, reverse=True):
            g = pending.get(i)
            rec = self._records[i]
            if g is None or rec.op_name is None:
                continue

            op = self._registry.get(rec.op_name)
            in_values = [self._records[j].value for j in rec.inputs]
            try:
                grads = tuple(op.backward(self._backend, g, in_values, rec.value))
            except Exception as e:
                raise BackwardError(i, rec.op_name, f"{type(e).__name__}: {e}") from e

            if len(grads) != len(rec.inputs):
                raise GradientShapeError(
                    len(rec.inputs),
                    len(grads),
                    node_index=i,
                    detail=f"{rec.op_name!r} backward returned {len(grads)} "
                    f"gradient(s) for {len(rec.inputs)} input(s)",
                )

            self._accumulate(pending, rec, grads)

        self._check_stale(pending)
        for i, g in pending.items():
            self._records[i].grad.add_(g)

    def _check_stale(self, pending: Dict[int, Tensor]) -> None:
        """Diagnose parameters about to receive gradient on top of a stepped one."""
        for i in pending:
            param = self._records[i].parameter
            if param is None or not param.has_stale_grad:
                continue
            if self._strict:
                raise StaleGradientError(param.name)
            warnings.warn(
                f"Parameter {param.name or '<unnamed>'!s} still holds a gradient "
                "consumed by an optimizer step; new contributions will be added "
                "to it. Call zero_grad() before backward.",
                StaleGradientWarning,
                stacklevel=4,
            )

    def _accumulate(
        self, pending: Dict[int, Tensor], rec: _NodeRecord, grads: Sequence[Tensor]
    ) -> None:
        for j, gj in zip(rec.inputs, grads):
            target = self._records[j]
            if not target.requires_grad:
                continue
            if not isinstance(gj, Tensor):
                raise GradientShapeError(
                    target.value.shape,
                    getattr(gj, "shape", None),
                    node_index=j,
                    detail=f"{rec.op_name!r} backward returned a "
                    f"{type(gj).__name__}, not a Tensor",
                )
            if not gj.shape.same_as(target.value.shape):
                raise GradientShapeError(
                    target.value.shape,
                    gj.shape,
                    node_index=j,
                    detail=f"returned by {rec.op_name!r} backward",
                )
            prev = pending.get(j)
            pending[j] = gj if prev is None else self._backend.add(prev, gj)

    def zero_grad(self) -> None:
        """
        Reset every node accumulator to zero.

        Parameter leaves reset their parameter (which also clears its
        stepped mark).
        """
        for rec in self._records:
            if rec.parameter is not None:
                rec.parameter.zero_grad()
            else:
                rec.grad.fill(0.0)
