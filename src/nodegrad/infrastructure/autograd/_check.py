"""
Finite-difference gradient checking.

`check_gradients` compares the gradients produced by a backward pass with
central-difference estimates, one input element at a time. It is the
primary correctness check for new ops: an op whose backward disagrees with
its forward fails here with the offending input and element.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from ...domain._backend import IBackend
from ...domain._errors import GradientCheckError
from ..ops._registry import OpRegistry
from ..tensor._tensor import Tensor
from ._graph import Graph
from ._node import Node

BuildLoss = Callable[[Graph, List[Node]], Node]


def numerical_grad(f: Callable[[], float], tensor: Tensor, eps: float = 1e-6) -> Tensor:
    """
    Estimate ``df/dtensor`` by central differences.

    Each element is perturbed in place by ``+eps`` and ``-eps`` and
    restored afterwards.

    Parameters
    ----------
    f : Callable[[], float]
        Function reading `tensor` and returning a scalar.
    tensor : Tensor
        Tensor to differentiate with respect to.
    eps : float, optional
        Perturbation size. Defaults to 1e-6.

    Returns
    -------
    Tensor
        Estimated gradient, same shape as `tensor`.
    """
    buf = tensor._raw()
    out = np.zeros(tensor.numel, dtype=np.float64)
    for i in range(tensor.numel):
        orig = buf[i]
        try:
            buf[i] = orig + eps
            f_plus = float(f())
            buf[i] = orig - eps
            f_minus = float(f())
        finally:
            buf[i] = orig
        out[i] = (f_plus - f_minus) / (2.0 * eps)
    return Tensor(tensor.shape, out)


def check_gradients(
    build_loss: BuildLoss,
    inputs: Sequence[Tensor],
    *,
    eps: float = 1e-6,
    rtol: float = 1e-4,
    atol: float = 1e-4,
    registry: Optional[OpRegistry] = None,
    backend: Union[IBackend, str, None] = None,
) -> float:
    """
    Verify backward against central differences for every input element.

    Parameters
    ----------
    build_loss : Callable[[Graph, list[Node]], Node]
        Builds the computation on a fresh graph from one variable node per
        input and returns the node to differentiate. Non-scalar outputs
        are differentiated as the sum of their elements.
    inputs : Sequence[Tensor]
        Points at which gradients are checked. They are perturbed in place
        during the check and restored afterwards.
    eps : float, optional
        Finite-difference step.
    rtol, atol : float, optional
        Elementwise tolerance: ``|analytic - numerical| <= atol + rtol * |numerical|``.
    registry, backend : optional
        Forwarded to every `Graph` built.

    Returns
    -------
    float
        Largest absolute difference observed.

    Raises
    ------
    GradientCheckError
        On the first element outside tolerance.
    """

    def build() -> Node:
        g = Graph(registry=registry, backend=backend)
        nodes = [g.variable(t) for t in inputs]
        return build_loss(g, nodes)

    root = build()
    root.backward()
    graph = root.graph
    analytic = [graph.node(k).grad.to_numpy().reshape(-1) for k in range(len(inputs))]

    def f() -> float:
        vals = build().value.data
        return float(np.add.accumulate(vals)[-1]) if vals.size else 0.0

    worst = 0.0
    for k, tensor in enumerate(inputs):
        numeric = numerical_grad(f, tensor, eps).to_numpy().reshape(-1)
        diff = np.abs(analytic[k] - numeric)
        bad = np.nonzero(diff > atol + rtol * np.abs(numeric))[0]
        if bad.size:
            e = int(bad[0])
            raise GradientCheckError(k, e, float(analytic[k][e]), float(numeric[e]))
        if diff.size:
            worst = max(worst, float(diff.max()))
    return worst
