"""
Op registry.

An `OpRegistry` maps stable op names to stateless `Op` instances. Graphs
dispatch by name through a registry, so adding an operator means
registering it, never editing the traversal engine.

Registration happens explicitly, in a fixed order, during startup
(`register_builtin_ops`); there is no discovery by import side effects.
A registry can be frozen once populated.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple, TypeVar

from typing_extensions import Self

from ...domain._errors import UnregisteredOp
from ...domain._op import Op

O = TypeVar("O", bound=Op)


class OpRegistry:
    """
    Name-keyed, insertion-ordered collection of ops.

    Notes
    -----
    - `get` of an unknown name raises `UnregisteredOp`; the registry never
      returns a placeholder.
    - After `freeze()`, further registration raises `RuntimeError`.
    """

    def __init__(self) -> None:
        self._ops: Dict[str, Op] = {}
        self._frozen = False

    @classmethod
    def with_builtins(cls) -> Self:
        """Return a new, unfrozen registry holding every built-in op."""
        from ._builtins import register_builtin_ops

        reg = cls()
        register_builtin_ops(reg)
        return reg

    def register(self, op: O, *, overwrite: bool = False) -> O:
        """
        Register `op` under ``op.name``.

        Parameters
        ----------
        op : Op
            Op instance to register.
        overwrite : bool, optional
            Allow replacing an existing registration. Defaults to False.

        Returns
        -------
        Op
            The registered op, so the call can be chained.

        Raises
        ------
        TypeError
            If `op` is not an `Op`.
        ValueError
            If the name is empty, or already registered and `overwrite` is
            False.
        RuntimeError
            If the registry is frozen.
        """
        if not isinstance(op, Op):
            raise TypeError(f"Expected an Op instance, got {type(op).__name__}")
        name = op.name
        if not isinstance(name, str) or not name:
            raise ValueError(f"{type(op).__name__} must define a non-empty name")
        if self._frozen:
            raise RuntimeError(f"Cannot register {name!r}: registry is frozen")
        if not overwrite and name in self._ops:
            raise ValueError(f"Op already registered: {name!r}")
        self._ops[name] = op
        return op

    def get(self, name: str) -> Op:
        """
        Return the op registered under `name`.

        Raises
        ------
        UnregisteredOp
            If `name` is not registered.
        """
        try:
            return self._ops[name]
        except KeyError:
            raise UnregisteredOp(name, self.names()) from None

    def find(self, name: str) -> Optional[Op]:
        """Return the op registered under `name`, or None."""
        return self._ops.get(name)

    def names(self) -> Tuple[str, ...]:
        """Return the registered names in registration order."""
        return tuple(self._ops)

    def freeze(self) -> Self:
        """Reject further registration. Returns the registry."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, name: object) -> bool:
        return name in self._ops

    def __iter__(self) -> Iterator[str]:
        return iter(self._ops)

    def __len__(self) -> int:
        return len(self._ops)

    def __repr__(self) -> str:
        state = ", frozen" if self._frozen else ""
        return f"OpRegistry({list(self._ops)}{state})"


_DEFAULT: Optional[OpRegistry] = None


def default_registry() -> OpRegistry:
    """
    Return the process-wide registry of built-in ops.

    Built once, on first use, and frozen. Callers needing custom ops build
    their own registry with `OpRegistry.with_builtins()`.
    """
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = OpRegistry.with_builtins().freeze()
    return _DEFAULT
