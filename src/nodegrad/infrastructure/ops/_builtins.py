"""
Built-in op set and its registration order.

`BUILTIN_OPS` is the single, explicit list of operators shipped with
nodegrad. Registries are populated from it in order; nothing is discovered
at import time.
"""

from __future__ import annotations

from typing import Tuple, Type

from ...domain._op import Op
from ._activations import ExpOp, LogOp, ReLUOp, SigmoidOp, SoftmaxOp
from ._arithmetic import AddBroadcastOp, AddOp, MulOp, SubOp
from ._losses import CrossEntropyOp, MSELossOp
from ._matmul import MatMulOp
from ._reduction import MeanOp, SumOp

BUILTIN_OPS: Tuple[Type[Op], ...] = (
    AddOp,
    SubOp,
    MulOp,
    AddBroadcastOp,
    MatMulOp,
    ReLUOp,
    SigmoidOp,
    ExpOp,
    LogOp,
    SoftmaxOp,
    SumOp,
    MeanOp,
    MSELossOp,
    CrossEntropyOp,
)


def register_builtin_ops(registry) -> None:
    """
    Register one instance of every built-in op into `registry`, in
    `BUILTIN_OPS` order.
    """
    for op_cls in BUILTIN_OPS:
        registry.register(op_cls())
