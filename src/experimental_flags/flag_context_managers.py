"""
Context managers for temporarily modifying experimental flags.

Used by tests and diagnostics that need a flag in a known state for the
duration of a block.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator, Mapping

from .flag_values import ExperimentalFlag, FlagKey
from .flag_registry import FlagRegistry

logger = logging.getLogger(__name__)


@contextmanager
def override_flags(
    registry: FlagRegistry, flag_overrides: Mapping[FlagKey, bool]
) -> Generator[None, None, None]:
    """
    Temporarily override multiple flags.

    Aliases are resolved to their canonical flags, and the previous values
    are restored on exit even if the block raises.

    Args:
        registry: Registry owning the flags
        flag_overrides: Flag keys and their temporary values

    Yields:
        None

    Raises:
        KeyError: If a key does not resolve to a flag; nothing is changed
    """
    originals: Dict[FlagKey, ExperimentalFlag] = {}
    for key in flag_overrides:
        flag = registry.resolve(key)
        if flag is None:
            raise KeyError(f"Unknown experimental flag: {key!r}")
        originals[key] = flag

    try:
        for key, value in flag_overrides.items():
            registry.try_set(originals[key].id, value)

        logger.debug(f"Flags overridden via context manager: {dict(flag_overrides)}")
        yield

    finally:
        for original in reversed(list(originals.values())):
            registry.try_set(original.id, original.enabled)

        logger.debug("Flag override context manager restored")


@contextmanager
def flag_enabled(registry: FlagRegistry, key: FlagKey) -> Generator[None, None, None]:
    """Context manager to enable a single flag."""
    with override_flags(registry, {key: True}):
        yield


@contextmanager
def flag_disabled(registry: FlagRegistry, key: FlagKey) -> Generator[None, None, None]:
    """Context manager to disable a single flag."""
    with override_flags(registry, {key: False}):
        yield
