"""
Runtime configuration read from environment variables.

nodegrad has no configuration file. The handful of process-wide knobs are
environment variables, parsed once into a frozen `RuntimeConfig`:

- ``NODEGRAD_BACKEND``: name of the backend new graphs use (default ``"cpu"``)
- ``NODEGRAD_SEED``: seed of the process-default determinism context
  (default ``0``)
- ``NODEGRAD_STRICT_GRADIENTS``: turn stale-gradient warnings into errors
  (default off)

Boolean variables follow the usual convention: ``"0"``, ``""``, ``"false"``,
``"False"`` and ``"FALSE"`` are false, anything else is true.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_BACKEND = "NODEGRAD_BACKEND"
ENV_SEED = "NODEGRAD_SEED"
ENV_STRICT_GRADIENTS = "NODEGRAD_STRICT_GRADIENTS"

_FALSY = ("0", "", "false", "False", "FALSE")


def _env_flag(env: Mapping[str, str], key: str, default: str = "0") -> bool:
    return env.get(key, default) not in _FALSY


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Immutable snapshot of the runtime configuration.

    Attributes
    ----------
    backend : str
        Registry name of the default backend.
    seed : int
        Seed for the process-default `DeterminismContext`.
    strict_gradients : bool
        Whether stale parameter gradients raise instead of warn.
    """

    backend: str = "cpu"
    seed: int = 0
    strict_gradients: bool = False


def load_config(env: Optional[Mapping[str, str]] = None) -> RuntimeConfig:
    """
    Parse a `RuntimeConfig` from environment variables.

    Parameters
    ----------
    env : Mapping[str, str], optional
        Mapping to read from. Defaults to ``os.environ``.

    Returns
    -------
    RuntimeConfig
        A fresh configuration snapshot.

    Raises
    ------
    ValueError
        If ``NODEGRAD_SEED`` is not an integer.
    """
    if env is None:
        env = os.environ

    backend = env.get(ENV_BACKEND, "").strip() or "cpu"

    raw_seed = env.get(ENV_SEED, "").strip()
    try:
        seed = int(raw_seed) if raw_seed else 0
    except ValueError as e:
        raise ValueError(f"{ENV_SEED} must be an integer, got {raw_seed!r}") from e

    return RuntimeConfig(
        backend=backend,
        seed=seed,
        strict_gradients=_env_flag(env, ENV_STRICT_GRADIENTS),
    )


_CONFIG: Optional[RuntimeConfig] = None


def get_config() -> RuntimeConfig:
    """Return the cached process configuration, loading it on first use."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def reset_config() -> None:
    """Drop the cached configuration so the next `get_config()` re-reads it."""
    global _CONFIG
    _CONFIG = None
