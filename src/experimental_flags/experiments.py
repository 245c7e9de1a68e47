"""
Declarative flag sets.

Subclass CommonExperiments and declare flags as class attributes::

    class Experiments(CommonExperiments):
        FooBar = flag()
        Baz = flag(enabled=True)
        LegacyFoo = alias_of("FooBar")

    experiments = Experiments(ExperimentsConfig(config_path="flags.json"))
    experiments.enable("LegacyFoo")
    assert experiments.FooBar.enabled

The instance is its own registry. Construct it once at start-up and pass it to
the components that check flags.
"""

import logging
from typing import FrozenSet, Optional

from .config import ExperimentsConfig, create_persistence, default_config_path
from .declarations import collect_declarations
from .interfaces import IPersistenceGateway
from .flag_registry import FlagRegistry

logger = logging.getLogger(__name__)

_RESERVED_NAMES: FrozenSet[str] = frozenset(dir(FlagRegistry)) | {"config"}


class CommonExperiments(FlagRegistry):
    """Base class for flag sets declared with flag() and alias_of()."""

    def __init__(
        self,
        config: Optional[ExperimentsConfig] = None,
        *,
        persistence: Optional[IPersistenceGateway] = None,
    ):
        """
        Initialize the flag set.

        Args:
            config: Persistence settings; read from the environment if omitted,
                with a document path derived from the class name
            persistence: Gateway overriding the one built from ``config``

        Raises:
            FlagRegistrationError: If the declared flags are not unique
        """
        if config is None:
            config = ExperimentsConfig.from_env(default_config_path(type(self).__name__))
        self.config = config

        declarations = collect_declarations(type(self), reserved_names=_RESERVED_NAMES)
        super().__init__(
            declarations,
            persistence=persistence or create_persistence(config),
            autoload=config.autoload,
            autosave=config.autosave,
        )
        logger.debug(f"{type(self).__name__} initialized with {len(self)} flags")
