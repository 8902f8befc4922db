"""
Backend registry.

Backends are looked up by name so graphs (and the ``NODEGRAD_BACKEND``
environment variable) can select one without importing it. The reference
`CpuBackend` is registered under ``"cpu"`` at import time.

Usage
-----
    register_backend("mine", MyBackend)
    graph = Graph(backend=get_backend("mine"))
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from ...domain._backend import IBackend
from ._cpu import CpuBackend

_FACTORIES: Dict[str, Callable[[], IBackend]] = {}
_INSTANCES: Dict[str, IBackend] = {}


def register_backend(
    name: str, factory: Callable[[], IBackend], *, overwrite: bool = False
) -> None:
    """
    Register a backend factory under `name`.

    Parameters
    ----------
    name : str
        Registry key.
    factory : Callable[[], IBackend]
        Zero-argument callable (typically the backend class) producing the
        backend. It is invoked lazily, once, on first `get_backend(name)`.
    overwrite : bool, optional
        Allow replacing an existing registration. Defaults to False.

    Raises
    ------
    ValueError
        If `name` is empty, or already registered and `overwrite` is False.
    """
    if not isinstance(name, str) or not name:
        raise ValueError("Backend name must be a non-empty string")
    if not overwrite and name in _FACTORIES:
        raise ValueError(f"Backend already registered: {name!r}")
    _FACTORIES[name] = factory
    _INSTANCES.pop(name, None)


def get_backend(name: Optional[str] = None) -> IBackend:
    """
    Return the (shared) backend instance registered under `name`.

    Parameters
    ----------
    name : str, optional
        Registry key. Defaults to the configured ``NODEGRAD_BACKEND``.

    Raises
    ------
    ValueError
        If no backend is registered under `name`.
    """
    if name is None:
        from .._config import get_config

        name = get_config().backend

    inst = _INSTANCES.get(name)
    if inst is not None:
        return inst
    try:
        factory = _FACTORIES[name]
    except KeyError as e:
        available = ", ".join(sorted(_FACTORIES)) or "<none>"
        raise ValueError(
            f"Unsupported backend name: {name!r}. Available: {available}"
        ) from e
    inst = factory()
    _INSTANCES[name] = inst
    return inst


def available_backends() -> Tuple[str, ...]:
    """Return registered backend names (sorted)."""
    return tuple(sorted(_FACTORIES))


register_backend("cpu", CpuBackend)

__all__ = [
    CpuBackend.__name__,
    register_backend.__name__,
    get_backend.__name__,
    available_backends.__name__,
]
