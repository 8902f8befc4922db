"""
Infrastructure layer: NumPy-backed implementations of the domain contracts.
"""

from ._config import RuntimeConfig, get_config, load_config, reset_config
from ._determinism import DeterminismContext, default_context, set_seed
from .tensor import Tensor
from .backend import CpuBackend, available_backends, get_backend, register_backend
from .ops import OpRegistry, default_registry, register_builtin_ops
from .autograd import Graph, Node, check_gradients, numerical_grad
from ._parameter import Parameter, zero_grad
from ._module import Module
from ._linear import Linear
from ._activations import ReLU, Sigmoid, Softmax
from .models import Sequential
from ._losses import cross_entropy, mse_loss
from .optimizers import SGD, Adam
from .utils import WeightInitializer

__all__ = [
    RuntimeConfig.__name__,
    get_config.__name__,
    load_config.__name__,
    reset_config.__name__,
    DeterminismContext.__name__,
    default_context.__name__,
    set_seed.__name__,
    Tensor.__name__,
    CpuBackend.__name__,
    available_backends.__name__,
    get_backend.__name__,
    register_backend.__name__,
    OpRegistry.__name__,
    default_registry.__name__,
    register_builtin_ops.__name__,
    Graph.__name__,
    Node.__name__,
    check_gradients.__name__,
    numerical_grad.__name__,
    Parameter.__name__,
    zero_grad.__name__,
    Module.__name__,
    Linear.__name__,
    ReLU.__name__,
    Sigmoid.__name__,
    Softmax.__name__,
    Sequential.__name__,
    cross_entropy.__name__,
    mse_loss.__name__,
    SGD.__name__,
    Adam.__name__,
    WeightInitializer.__name__,
]
