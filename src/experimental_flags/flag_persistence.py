"""
Persistence for flag state.

The registry talks to an IPersistenceGateway for raw documents and uses
FlagDocumentConverter to translate between documents and flag values. Only
canonical flags are written; aliases are write-through names and never
appear in a saved document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Union
from uuid import UUID

from .flag_values import ExperimentalFlag
from .interfaces import IPersistenceGateway

if TYPE_CHECKING:
    from .flag_registry import FlagRegistry

logger = logging.getLogger(__name__)


class JsonFilePersistence(IPersistenceGateway):
    """Stores the flag document as an indented JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read_document(self) -> Optional[Dict[str, Any]]:
        if not self.path.is_file():
            logger.debug(f"Flag config file does not exist: {self.path}")
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Failed to load flag config file {self.path}: {e}")
            return None

        if not isinstance(document, dict):
            logger.warning(
                f"Flag config file {self.path} must contain a JSON object, "
                f"got {type(document).__name__}"
            )
            return None

        logger.debug(f"Loaded flag config from {self.path}")
        return document

    def write_document(self, document: Dict[str, Any]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, sort_keys=True, ensure_ascii=False)
                f.write("\n")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save flag config file {self.path}: {e}")
            return False

        logger.debug(f"Saved flag config to {self.path}")
        return True

    def __repr__(self) -> str:
        return f"JsonFilePersistence(path={str(self.path)!r})"


class NullPersistence(IPersistenceGateway):
    """Gateway used when persistence is disabled."""

    def read_document(self) -> Optional[Dict[str, Any]]:
        return None

    def write_document(self, document: Dict[str, Any]) -> bool:
        return True


class FlagDocumentConverter:
    """Converts between flag values and the persisted JSON shape."""

    @staticmethod
    def flag_to_dict(flag: ExperimentalFlag) -> Dict[str, Any]:
        return {"id": str(flag.id), "name": flag.name, "enabled": flag.enabled}

    def dump(self, registry: "FlagRegistry") -> Dict[str, Any]:
        """
        Build the document for all canonical flags of a registry.

        Returns:
            Dict keyed by declared flag name
        """
        return {flag.name: self.flag_to_dict(flag) for flag in registry.flags()}

    def read_overrides(self, registry: "FlagRegistry", document: Dict[str, Any]) -> Dict[UUID, bool]:
        """
        Extract the persisted enabled states that apply to a registry.

        Entries are matched by name first and by their "id" field second.
        Alias entries, unknown entries and entries without a boolean state are
        skipped. Identity always comes from the registry.

        Args:
            registry: Registry whose flags are being restored
            document: Decoded JSON object

        Returns:
            Mapping of flag identifier to persisted enabled state
        """
        overrides: Dict[UUID, bool] = {}

        for entry_name, entry in document.items():
            enabled = self._parse_enabled(entry)
            if enabled is None:
                logger.warning(f"Ignoring flag entry '{entry_name}': no boolean 'enabled' value")
                continue

            slot = registry.get_slot(entry_name)
            if slot is not None and slot.is_alias:
                logger.debug(f"Ignoring persisted alias entry '{entry_name}'")
                continue

            if slot is None:
                slot = self._slot_by_entry_id(registry, entry)

            if slot is None:
                logger.debug(f"Ignoring unknown flag entry '{entry_name}'")
                continue

            overrides[slot.flag_id] = enabled

        return overrides

    @staticmethod
    def _parse_enabled(entry: Any) -> Optional[bool]:
        if isinstance(entry, bool):
            return entry
        if isinstance(entry, dict) and isinstance(entry.get("enabled"), bool):
            return entry["enabled"]
        return None

    @staticmethod
    def _slot_by_entry_id(registry: "FlagRegistry", entry: Any):
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
            return None
        try:
            flag_id = UUID(entry["id"])
        except ValueError:
            return None
        return registry.get_slot(flag_id)
