"""
Flag and alias declarations.

A flag set is described by an ordered list of declarations, each either a
FlagDeclaration (a real flag that receives an identity) or an AliasDeclaration
(a name that forwards to another flag). The list can be written out explicitly
or collected from class attributes created with flag() and alias_of().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Set, Union

from .exceptions import FlagRegistrationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlagDeclaration:
    """A real flag declared in ``scope``."""

    name: str
    scope: str
    enabled: bool = False


@dataclass(frozen=True)
class AliasDeclaration:
    """An alias named ``name`` that forwards to ``target_name``."""

    name: str
    target_name: str
    scope: str


Declaration = Union[FlagDeclaration, AliasDeclaration]


def scope_of(owner: type) -> str:
    """Get the scope string used for flags declared on a class."""
    return f"{owner.__module__}.{owner.__qualname__}"


class FlagAttribute:
    """
    Class attribute marking a declared flag.

    On an instance, reading the attribute returns the flag's current value from
    the owning registry. Assignment is rejected: flags change only through the
    registry.
    """

    def __init__(self, enabled: bool = False):
        self.enabled = bool(enabled)
        self.name: Optional[str] = None
        self.scope: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.scope = scope_of(owner)

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        slot = instance.get_slot(self.name)
        return slot.get() if slot is not None else None

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(
            f"Flag '{self.name}' is read-only; use enable(), disable() or try_set()"
        )

    def to_declaration(self) -> Declaration:
        return FlagDeclaration(name=self.name, scope=self.scope, enabled=self.enabled)


class AliasAttribute(FlagAttribute):
    """Class attribute marking an alias of another flag."""

    def __init__(self, target_name: str):
        super().__init__(enabled=False)
        if not isinstance(target_name, str) or not target_name.strip():
            raise ValueError("Alias target must be a non-empty string")
        self.target_name = target_name

    def to_declaration(self) -> Declaration:
        return AliasDeclaration(name=self.name, target_name=self.target_name, scope=self.scope)


def flag(enabled: bool = False) -> Any:
    """Declare a flag on a CommonExperiments subclass."""
    return FlagAttribute(enabled)


def alias_of(target_name: str) -> Any:
    """Declare an alias of the flag named ``target_name``."""
    return AliasAttribute(target_name)


def collect_declarations(
    cls: type, reserved_names: Optional[Iterable[str]] = None
) -> List[Declaration]:
    """
    Collect declarations from the class attributes of ``cls`` and its bases.

    Base classes are visited first, and attributes keep their definition order
    within a class. A name declared in both a base and a subclass yields two
    declarations, which the registry reports as a duplicate.

    Args:
        cls: The flag-set class
        reserved_names: Attribute names that declarations must not shadow

    Returns:
        List of declarations in registration order

    Raises:
        FlagRegistrationError: If a declaration shadows a reserved name
    """
    reserved: Set[str] = set(reserved_names or ())
    declarations: List[Declaration] = []

    for klass in reversed(cls.__mro__):
        for attr_name, value in vars(klass).items():
            if not isinstance(value, FlagAttribute):
                continue
            if attr_name in reserved:
                raise FlagRegistrationError(
                    f"Flag '{attr_name}' in '{scope_of(klass)}' shadows a registry attribute",
                    name=attr_name,
                    scope=scope_of(klass),
                )
            declarations.append(value.to_declaration())

    logger.debug(f"Collected {len(declarations)} declarations from {scope_of(cls)}")
    return declarations
