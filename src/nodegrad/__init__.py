"""
nodegrad: a small reverse-mode automatic differentiation engine.

Forward evaluation builds an arena-backed computation graph out of
registered, pluggable ops running on a deterministic CPU backend;
`Node.backward()` propagates gradients back through it.

Typical use::

    from nodegrad import Graph, Tensor

    g = Graph()
    x = g.variable(Tensor.from_numpy([[1.0, 2.0]]))
    w = g.variable(Tensor.from_numpy([[3.0], [4.0]]))
    y = g.sum(g.matmul(x, w))
    y.backward()
    w.grad.to_numpy()  # [[1.], [2.]]
"""

from .domain import (
    BackwardError,
    GradientCheckError,
    GradientShapeError,
    IBackend,
    IModule,
    IOptimizer,
    IParameter,
    ITensor,
    Op,
    Shape,
    ShapeMismatch,
    StaleGradientError,
    StaleGradientWarning,
    UninitializedParameter,
    UnregisteredOp,
)
from .infrastructure import (
    SGD,
    Adam,
    CpuBackend,
    DeterminismContext,
    Graph,
    Linear,
    Module,
    Node,
    OpRegistry,
    Parameter,
    ReLU,
    RuntimeConfig,
    Sequential,
    Sigmoid,
    Softmax,
    Tensor,
    WeightInitializer,
    available_backends,
    check_gradients,
    cross_entropy,
    default_context,
    default_registry,
    get_backend,
    get_config,
    load_config,
    mse_loss,
    numerical_grad,
    register_backend,
    register_builtin_ops,
    reset_config,
    set_seed,
    zero_grad,
)

__version__ = "0.1.0"

__all__ = [
    # domain
    Shape.__name__,
    ITensor.__name__,
    IBackend.__name__,
    Op.__name__,
    IParameter.__name__,
    IModule.__name__,
    IOptimizer.__name__,
    BackwardError.__name__,
    GradientCheckError.__name__,
    GradientShapeError.__name__,
    ShapeMismatch.__name__,
    StaleGradientError.__name__,
    StaleGradientWarning.__name__,
    UninitializedParameter.__name__,
    UnregisteredOp.__name__,
    # infrastructure
    Tensor.__name__,
    CpuBackend.__name__,
    register_backend.__name__,
    get_backend.__name__,
    available_backends.__name__,
    OpRegistry.__name__,
    default_registry.__name__,
    register_builtin_ops.__name__,
    Graph.__name__,
    Node.__name__,
    check_gradients.__name__,
    numerical_grad.__name__,
    DeterminismContext.__name__,
    default_context.__name__,
    set_seed.__name__,
    RuntimeConfig.__name__,
    get_config.__name__,
    load_config.__name__,
    reset_config.__name__,
    Parameter.__name__,
    zero_grad.__name__,
    Module.__name__,
    Linear.__name__,
    ReLU.__name__,
    Sigmoid.__name__,
    Softmax.__name__,
    Sequential.__name__,
    mse_loss.__name__,
    cross_entropy.__name__,
    SGD.__name__,
    Adam.__name__,
    WeightInitializer.__name__,
]
