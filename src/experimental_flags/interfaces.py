"""
Interfaces for flag providers and persistence gateways.
Implements Dependency Inversion Principle between the registry and its storage.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .flag_values import FlagKey, FlagValue


class IFlagProvider(ABC):
    """
    Interface for components that answer flag queries and accept flag changes.

    Keys may be a flag identifier, a case-insensitive flag or alias name, or a
    flag value previously returned by try_get().
    """

    @abstractmethod
    def is_enabled(self, key: FlagKey) -> bool:
        """
        Check whether a flag is enabled.

        Args:
            key: Identifier, name, or flag value

        Returns:
            True only if the key resolves to a flag that is enabled
        """
        pass

    @abstractmethod
    def try_get(self, key: FlagKey) -> Optional[FlagValue]:
        """
        Look up a flag.

        Args:
            key: Identifier, name, or flag value

        Returns:
            The flag (or alias handle), or None if not found
        """
        pass

    @abstractmethod
    def try_set(self, key: FlagKey, enabled: bool) -> bool:
        """
        Set the enabled state of a flag.

        Args:
            key: Identifier, name, or flag value
            enabled: New state

        Returns:
            True if a flag was updated, False otherwise
        """
        pass

    def enable(self, key: FlagKey) -> bool:
        """Enable a flag. Returns False if it cannot be resolved."""
        return self.try_set(key, True)

    def disable(self, key: FlagKey) -> bool:
        """Disable a flag. Returns False if it cannot be resolved."""
        return self.try_set(key, False)


class IPersistenceGateway(ABC):
    """
    Interface for reading and writing the persisted flag document.

    Implementations must not raise for expected I/O problems; they report them
    through the return value and the log.
    """

    @abstractmethod
    def read_document(self) -> Optional[Dict[str, Any]]:
        """
        Read the persisted document.

        Returns:
            The decoded JSON object, or None if nothing usable was found
        """
        pass

    @abstractmethod
    def write_document(self, document: Dict[str, Any]) -> bool:
        """
        Write the persisted document.

        Args:
            document: JSON-serializable mapping

        Returns:
            True if the document was written
        """
        pass
