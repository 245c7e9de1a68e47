"""
Experimental flag registry.

This package provides named, uniquely identified boolean flags with separated concerns:
- flag_identity: deterministic flag identifiers
- FlagRegistry: registration, lookup, alias resolution and mutation
- CommonExperiments: declarative flag sets built on the registry
- flag_persistence: JSON-backed load/save of flag state
- override_flags: context managers for testing scenarios
"""

from .config import ExperimentsConfig, create_persistence, default_config_path
from .flag_context_managers import flag_disabled, flag_enabled, override_flags
from .declarations import AliasDeclaration, FlagDeclaration, alias_of, collect_declarations, flag
from .exceptions import ExperimentalFlagsError, ExperimentsLoadError, FlagRegistrationError
from .experiments import CommonExperiments
from .flag_values import ExperimentalFlag, ExperimentalFlagAlias
from .flag_identity import NAMESPACE_ID, create_flag_id, flag_id_for, namespace_id_for
from .interfaces import IFlagProvider, IPersistenceGateway
from .flag_persistence import FlagDocumentConverter, JsonFilePersistence, NullPersistence
from .flag_registry import FlagRegistry
from .flag_slots import AliasSlot, FlagSlot

__all__ = [
    "AliasDeclaration",
    "AliasSlot",
    "CommonExperiments",
    "ExperimentalFlag",
    "ExperimentalFlagAlias",
    "ExperimentalFlagsError",
    "ExperimentsConfig",
    "ExperimentsLoadError",
    "FlagDeclaration",
    "FlagDocumentConverter",
    "FlagRegistrationError",
    "FlagRegistry",
    "FlagSlot",
    "IFlagProvider",
    "IPersistenceGateway",
    "JsonFilePersistence",
    "NAMESPACE_ID",
    "NullPersistence",
    "alias_of",
    "collect_declarations",
    "create_flag_id",
    "create_persistence",
    "default_config_path",
    "flag_disabled",
    "flag_enabled",
    "flag",
    "flag_id_for",
    "namespace_id_for",
    "override_flags",
]
