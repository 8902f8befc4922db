"""
Differentiable operators and the op registry.
"""

from ._registry import OpRegistry, default_registry
from ._builtins import BUILTIN_OPS, register_builtin_ops
from ._arithmetic import AddOp, SubOp, MulOp, AddBroadcastOp
from ._matmul import MatMulOp
from ._activations import ReLUOp, SigmoidOp, ExpOp, LogOp, SoftmaxOp
from ._reduction import SumOp, MeanOp
from ._losses import MSELossOp, CrossEntropyOp

__all__ = [
    OpRegistry.__name__,
    default_registry.__name__,
    "BUILTIN_OPS",
    register_builtin_ops.__name__,
    AddOp.__name__,
    SubOp.__name__,
    MulOp.__name__,
    AddBroadcastOp.__name__,
    MatMulOp.__name__,
    ReLUOp.__name__,
    SigmoidOp.__name__,
    ExpOp.__name__,
    LogOp.__name__,
    SoftmaxOp.__name__,
    SumOp.__name__,
    MeanOp.__name__,
    MSELossOp.__name__,
    CrossEntropyOp.__name__,
]
