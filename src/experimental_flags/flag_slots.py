"""
Storage slots for declared flags and aliases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union
from uuid import UUID

from .flag_values import ExperimentalFlag, ExperimentalFlagAlias

if TYPE_CHECKING:
    from .flag_registry import FlagRegistry


class FlagSlot:
    """Holds the current value of one declared flag."""

    is_alias = False

    def __init__(self, flag: ExperimentalFlag, scope: str):
        self._flag = flag
        self.scope = scope

    @property
    def name(self) -> str:
        return self._flag.name

    @property
    def key(self) -> str:
        return self._flag.name.lower()

    @property
    def flag_id(self) -> UUID:
        return self._flag.id

    def get(self) -> ExperimentalFlag:
        return self._flag

    def set(self, flag: ExperimentalFlag) -> None:
        if flag.id != self._flag.id:
            raise ValueError(
                f"Cannot store flag {flag.id} in the slot of '{self.name}' ({self.flag_id})"
            )
        self._flag = flag

    def __repr__(self) -> str:
        return f"FlagSlot(name={self.name!r}, scope={self.scope!r}, enabled={self._flag.enabled})"


class AliasSlot:
    """
    Slot-compatible handle that forwards to a target flag by name.

    get() returns the alias handle; set() writes the requested state to
    whichever flag the target name resolves to.
    """

    is_alias = True

    def __init__(self, registry: "FlagRegistry", target_name: str, name: str, scope: str):
        self._registry = registry
        self._alias = ExperimentalFlagAlias(registry, target_name, name)
        self.scope = scope

    @property
    def name(self) -> str:
        return self._alias.name

    @property
    def key(self) -> str:
        return self._alias.name.lower()

    @property
    def target_name(self) -> str:
        return self._alias.target_name

    def get(self) -> ExperimentalFlagAlias:
        return self._alias

    def set(self, flag: Union[ExperimentalFlag, ExperimentalFlagAlias]) -> bool:
        return self._registry.try_set(self._alias.target_name, flag.enabled)

    def __repr__(self) -> str:
        return f"AliasSlot(name={self.name!r}, target_name={self.target_name!r})"


Slot = Union[FlagSlot, AliasSlot]
