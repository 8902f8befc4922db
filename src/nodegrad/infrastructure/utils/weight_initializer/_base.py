"""
Weight initializer registry and dispatch utilities.

This module defines the concrete `WeightInitializer` used by the
infrastructure layer to apply registered initialization strategies (e.g.
Xavier, He) to tensors and parameters.

Design
------
- Initializers are registered by string name via a decorator-based registry.
- Each initializer is a callable ``(tensor, *, rng=None) -> tensor`` that
  overwrites `tensor` in place and returns it.
- Randomness comes exclusively from the `DeterminismContext` passed as
  `rng` (the process-default context when omitted). An initializer draws
  exactly ``tensor.numel`` values per call, in row-major order, so two
  contexts with the same seed initialize identically.

Usage example
-------------
Registering an initializer:

    @WeightInitializer.register_initializer("my_init")
    def my_init(tensor: Tensor, *, rng=None) -> Tensor:
        ...

Applying an initializer:

    init = WeightInitializer("xavier_uniform")
    init(weight, rng=DeterminismContext(42))
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Optional, TypeVar, Union

from ....domain.utils._weight_initialization import _WeightInitializer
from ..._determinism import DeterminismContext, default_context
from ..._parameter import Parameter
from ...tensor._tensor import Tensor

T = TypeVar("T", bound=Callable[..., Tensor])


def _resolve_rng(rng: Optional[DeterminismContext]) -> DeterminismContext:
    return rng if rng is not None else default_context()


class WeightInitializer(_WeightInitializer):
    """
    Registry-backed weight initializer dispatcher.

    Notes
    -----
    - Initializers are stored by string name in a class-level registry.
    - Calling the dispatcher on a `Parameter` initializes the parameter's
      value (allocating it if the parameter was declared shape-only) and
      returns the value tensor.
    """

    INITIALIZERS: ClassVar[Dict[str, Callable[..., Tensor]]] = {}

    def __init__(self, initializer_name: str) -> None:
        try:
            self._initializer: Callable[..., Tensor] = self.INITIALIZERS[
                initializer_name
            ]
        except KeyError as e:
            available = ", ".join(sorted(self.INITIALIZERS)) or "<none>"
            raise ValueError(
                f"Unsupported initializer name: {initializer_name!r}. "
                f"Available: {available}"
            ) from e
        self.name = initializer_name

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Decorator to register a weight initializer under `name`.

        Parameters
        ----------
        name:
            Registry key used to retrieve the initializer later.
        overwrite:
            If False (default), raises if `name` is already registered.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Initializer name must be a non-empty string")

        def decorator(func: T) -> T:
            if not overwrite and name in cls.INITIALIZERS:
                raise ValueError(f"Initializer already registered: {name!r}")
            cls.INITIALIZERS[name] = func
            return func

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """Return registered initializer names (sorted)."""
        return tuple(sorted(cls.INITIALIZERS))

    @classmethod
    def get(cls, name: str) -> Callable[..., Tensor]:
        """Get a registered initializer callable by name."""
        return cls.INITIALIZERS[name]

    def __call__(
        self, target: Union[Tensor, Parameter], *args: Any, **kwargs: Any
    ) -> Tensor:
        if isinstance(target, Parameter):
            target = target._storage_for_init()
        return self._initializer(target, *args, **kwargs)

    def __repr__(self) -> str:
        return f"WeightInitializer({self.name!r})"
