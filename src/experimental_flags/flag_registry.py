"""
Flag registry.

This module implements the registration and resolution of experimental flags.
The registry owns two indices built once at construction:

- by identifier: real flags only
- by lower-cased name: real flags and aliases, sharing one namespace

Every lookup is total (misses return None or False), while a misdeclared flag
set fails construction with FlagRegistrationError.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set
from uuid import UUID

from .declarations import AliasDeclaration, Declaration, FlagDeclaration
from .exceptions import FlagRegistrationError
from .flag_values import ExperimentalFlag, ExperimentalFlagAlias, FlagKey, FlagValue
from .flag_identity import create_flag_id, namespace_id_for
from .interfaces import IFlagProvider, IPersistenceGateway
from .flag_persistence import FlagDocumentConverter, NullPersistence
from .flag_slots import AliasSlot, FlagSlot, Slot

logger = logging.getLogger(__name__)


class FlagRegistry(IFlagProvider):
    """
    Registry of experimental flags and their aliases.

    This class is responsible for:
    - Assigning deterministic identifiers to declared flags
    - Enforcing case-insensitive name uniqueness across flags and aliases
    - Resolving aliases to their canonical flags
    - Replacing flag values and persisting after each change

    The registry performs no locking. Callers that mutate flags from several
    threads must serialize those calls themselves.
    """

    def __init__(
        self,
        declarations: Iterable[Declaration],
        *,
        persistence: Optional[IPersistenceGateway] = None,
        converter: Optional[FlagDocumentConverter] = None,
        autoload: bool = True,
        autosave: bool = True,
    ):
        """Initialize the registry.

        Args:
            declarations: Flag and alias declarations in registration order
            persistence: Gateway used by load() and save(); defaults to none
            converter: Document converter; defaults to FlagDocumentConverter
            autoload: Load persisted state once registration succeeds
            autosave: Save after every successful try_set()

        Raises:
            FlagRegistrationError: If the declarations are invalid or not unique
        """
        self._flags_by_id: Dict[UUID, FlagSlot] = {}
        self._flags_by_name: Dict[str, Slot] = {}
        self._persistence = persistence or NullPersistence()
        self._converter = converter or FlagDocumentConverter()
        self._autosave = autosave

        self._register_all(declarations)

        if autoload:
            self.load()

    def _register_all(self, declarations: Iterable[Declaration]) -> None:
        flag_declarations: List[FlagDeclaration] = []
        alias_declarations: List[AliasDeclaration] = []

        for declaration in declarations:
            if isinstance(declaration, AliasDeclaration):
                alias_declarations.append(declaration)
            elif isinstance(declaration, FlagDeclaration):
                flag_declarations.append(declaration)
            else:
                raise FlagRegistrationError(
                    f"Unsupported declaration type: {type(declaration).__name__}"
                )

        for declaration in flag_declarations:
            self._validate_name(declaration.name, declaration.scope)
            flag_name = declaration.name.lower()
            namespace_id = namespace_id_for(declaration.scope)
            flag_id = create_flag_id(namespace_id, declaration.name)

            existing = self._flags_by_name.get(flag_name)
            if existing is not None:
                raise FlagRegistrationError(
                    f"Tried to add a flag with name '{flag_name}' in '{declaration.scope}' "
                    f"but there is already a flag with that name defined in '{existing.scope}'.",
                    name=flag_name,
                    scope=declaration.scope,
                    existing_scope=existing.scope,
                )

            slot = FlagSlot(
                ExperimentalFlag(id=flag_id, name=declaration.name, enabled=declaration.enabled),
                scope=declaration.scope,
            )
            self._flags_by_id[flag_id] = slot
            self._flags_by_name[flag_name] = slot
            logger.debug(f"Registered flag '{declaration.name}' ({flag_id}) from {declaration.scope}")

        for declaration in alias_declarations:
            self._validate_name(declaration.name, declaration.scope)
            alias_name = declaration.name.lower()
            alias_slot = AliasSlot(self, declaration.target_name, declaration.name, declaration.scope)

            existing = self._flags_by_name.get(alias_name)
            if existing is not None:
                raise FlagRegistrationError(
                    f"Tried to add an alias with name '{alias_name}' in '{declaration.scope}' "
                    f"but there is already a flag with that name defined in '{existing.scope}'.",
                    name=alias_name,
                    scope=declaration.scope,
                    existing_scope=existing.scope,
                )

            self._flags_by_name[alias_name] = alias_slot
            logger.debug(f"Registered alias: {declaration.name} -> {declaration.target_name}")

        for alias_name, target_name in self.aliases().items():
            if self.resolve(target_name) is None:
                logger.warning(f"Alias '{alias_name}' points to unknown flag '{target_name}'")

    @staticmethod
    def _validate_name(name: object, scope: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise FlagRegistrationError(
                f"Flag name must be a non-empty string (got {name!r} in '{scope}')",
                scope=scope,
            )

    def get_slot(self, key: FlagKey) -> Optional[Slot]:
        """Get the slot for an identifier, a name, or a flag value."""
        if isinstance(key, UUID):
            return self._flags_by_id.get(key)
        if isinstance(key, str):
            if not key.strip():
                return None
            return self._flags_by_name.get(key.lower())
        if isinstance(key, ExperimentalFlagAlias):
            return self._flags_by_name.get(key.name.lower())
        if isinstance(key, ExperimentalFlag):
            return self._flags_by_id.get(key.id)
        return None

    def try_get(self, key: FlagKey) -> Optional[FlagValue]:
        slot = self.get_slot(key)
        return slot.get() if slot is not None else None

    def resolve(self, key: FlagKey) -> Optional[ExperimentalFlag]:
        """
        Resolve a key to its canonical flag, following aliases.

        Returns:
            The canonical flag, or None for unknown keys, dangling targets and
            alias cycles
        """
        visited: Set[str] = set()
        if isinstance(key, ExperimentalFlagAlias):
            visited.add(key.name.lower())
            value = self.try_get(key.target_name)
        else:
            value = self.try_get(key)

        while isinstance(value, ExperimentalFlagAlias):
            alias_name = value.name.lower()
            if alias_name in visited:
                logger.warning(f"Alias cycle detected at '{value.name}'")
                return None
            visited.add(alias_name)
            value = self.try_get(value.target_name)

        return value

    def is_enabled(self, key: FlagKey) -> bool:
        flag = self.resolve(key)
        return flag is not None and flag.enabled

    def try_set(self, key: FlagKey, enabled: bool) -> bool:
        if isinstance(key, (ExperimentalFlag, ExperimentalFlagAlias)):
            return self._try_set(None, key, enabled)

        slot = self.get_slot(key)
        if slot is None:
            logger.debug(f"Cannot set unknown flag {key!r}")
            return False
        return self._try_set(slot, slot.get(), enabled)

    def _try_set(self, slot: Optional[Slot], flag: FlagValue, enabled: bool) -> bool:
        # Aliases are never written through; operate on the canonical slot.
        if isinstance(flag, ExperimentalFlagAlias):
            canonical = self.resolve(flag)
            if canonical is None:
                logger.warning(
                    f"Cannot set alias '{flag.name}': target '{flag.target_name}' does not resolve"
                )
                return False
            flag = canonical
            slot = None

        if slot is None:
            slot = self._flags_by_id.get(flag.id)
            if slot is None:
                logger.debug(f"Cannot set unregistered flag '{flag.name}' ({flag.id})")
                return False

        slot.set(slot.get().with_enabled(enabled))
        logger.info(f"Flag '{slot.name}' {'enabled' if enabled else 'disabled'}")

        if self._autosave:
            self.save()
        return True

    def flags(self) -> List[ExperimentalFlag]:
        """Get the canonical flags in declaration order."""
        return [slot.get() for slot in self._flags_by_id.values()]

    def aliases(self) -> Dict[str, str]:
        """Get a mapping of declared alias names to their target names."""
        return {
            slot.name: slot.target_name
            for slot in self._flags_by_name.values()
            if isinstance(slot, AliasSlot)
        }

    def get_all_flags(self) -> Dict[str, bool]:
        """
        Get current state of all canonical flags.

        Returns:
            Dict[str, bool]: Declared flag names and their enabled state
        """
        return {flag.name: flag.enabled for flag in self.flags()}

    def log_current_flags(self) -> None:
        """Log current state of all flags for debugging."""
        logger.info("Current experimental flag state:")
        for flag_name, flag_value in self.get_all_flags().items():
            logger.info(f"  {flag_name}: {flag_value}")
        for alias_name, target_name in self.aliases().items():
            logger.info(f"  {alias_name} -> {target_name}")

    def load(self) -> bool:
        """
        Overlay persisted flag state onto the registry.

        Returns:
            True if a document was read, False if none was available
        """
        try:
            document = self._persistence.read_document()
        except Exception as e:
            logger.error(f"Failed to read persisted flags: {e}")
            return False

        if document is None:
            return False

        overrides = self._converter.read_overrides(self, document)
        for flag_id, enabled in overrides.items():
            slot = self._flags_by_id[flag_id]
            slot.set(slot.get().with_enabled(enabled))

        logger.debug(f"Restored {len(overrides)} persisted flag values")
        return True

    def save(self) -> None:
        """Persist all canonical flags. Failures are logged, never raised."""
        document = self._converter.dump(self)
        try:
            self._persistence.write_document(document)
        except Exception as e:
            logger.error(f"Failed to persist flags: {e}")

    def __contains__(self, key: object) -> bool:
        return self.get_slot(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._flags_by_id)
