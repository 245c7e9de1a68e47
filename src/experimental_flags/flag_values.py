"""
Flag values held by the registry.

ExperimentalFlag is an immutable value: enabling or disabling a flag produces a
new value with the same identity, and only the registry rebinds a slot to it.
ExperimentalFlagAlias is the handle stored for an alias; it owns no state and
looks its target up on every access.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional, Union
from uuid import UUID

if TYPE_CHECKING:
    from .flag_registry import FlagRegistry


@dataclass(frozen=True)
class ExperimentalFlag:
    """A named, identified boolean toggle."""

    id: UUID
    name: str
    enabled: bool = False

    def with_enabled(self, enabled: bool) -> "ExperimentalFlag":
        """Return a copy of this flag with a different enabled state."""
        return replace(self, enabled=bool(enabled))


class ExperimentalFlagAlias:
    """
    Forwarding handle for an alias name.

    Reads go to whatever flag the target name resolves to at the time of the
    call, so a handle obtained before a mutation never goes stale.
    """

    def __init__(self, registry: "FlagRegistry", target_name: str, name: str):
        self._registry = registry
        self._target_name = target_name
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def target_name(self) -> str:
        return self._target_name

    def resolve(self) -> Optional[ExperimentalFlag]:
        """Resolve to the canonical flag, or None if the target is dangling."""
        return self._registry.resolve(self)

    @property
    def id(self) -> Optional[UUID]:
        flag = self.resolve()
        return flag.id if flag is not None else None

    @property
    def enabled(self) -> bool:
        flag = self.resolve()
        return flag is not None and flag.enabled

    def with_enabled(self, enabled: bool) -> Optional[ExperimentalFlag]:
        flag = self.resolve()
        return flag.with_enabled(enabled) if flag is not None else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExperimentalFlagAlias):
            return NotImplemented
        return (
            self._registry is other._registry
            and self._name == other._name
            and self._target_name == other._target_name
        )

    def __hash__(self) -> int:
        return hash((id(self._registry), self._name, self._target_name))

    def __repr__(self) -> str:
        return f"ExperimentalFlagAlias(name={self._name!r}, target_name={self._target_name!r})"


FlagValue = Union[ExperimentalFlag, ExperimentalFlagAlias]
FlagKey = Union[UUID, str, ExperimentalFlag, ExperimentalFlagAlias]
