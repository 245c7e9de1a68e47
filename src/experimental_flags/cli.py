"""
Command line interface for inspecting and changing persisted flags.

Example:
    python -m experimental_flags --experiments myapp.flags:Experiments list
    python -m experimental_flags --experiments myapp.flags:Experiments enable LegacyFoo
"""

import argparse
import importlib
import logging
from typing import List, Optional, Type

from rich.console import Console
from rich.table import Table

from .config import ExperimentsConfig, default_config_path
from .exceptions import ExperimentsLoadError
from .experiments import CommonExperiments
from .flag_values import ExperimentalFlag

logger = logging.getLogger(__name__)


def load_experiments_class(path: str) -> Type[CommonExperiments]:
    """
    Import a flag-set class from a ``module:ClassName`` path.

    Raises:
        ExperimentsLoadError: If the path is malformed, the import fails, or
            the attribute is not a CommonExperiments subclass
    """
    module_name, sep, class_name = path.partition(":")
    if not sep or not module_name or not class_name:
        raise ExperimentsLoadError(f"Expected 'module:ClassName', got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ExperimentsLoadError(f"Cannot import module '{module_name}': {e}") from e

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, CommonExperiments):
        raise ExperimentsLoadError(f"'{path}' is not a CommonExperiments subclass")
    return cls


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="experimental-flags",
        description="Inspect and change persisted experimental flags",
    )
    parser.add_argument(
        "--experiments",
        required=True,
        help="Flag-set class as module:ClassName",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path of the JSON flag document (default: resources/config/<class>.json)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List all flags and aliases")
    for command, help_text in (
        ("show", "Show one flag or alias"),
        ("enable", "Enable a flag (aliases resolve to their target)"),
        ("disable", "Disable a flag (aliases resolve to their target)"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("name", help="Flag or alias name (case-insensitive)")
    return parser


def render_flags(experiments: CommonExperiments) -> Table:
    table = Table(title=f"{type(experiments).__name__} flags")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Id", no_wrap=True)
    table.add_column("Enabled", justify="center")
    table.add_column("Alias of")

    for flag in experiments.flags():
        table.add_row(flag.name, str(flag.id), _format_enabled(flag.enabled), "")
    for alias_name, target_name in experiments.aliases().items():
        table.add_row(alias_name, "", _format_enabled(experiments.is_enabled(alias_name)), target_name)
    return table


def _format_enabled(enabled: bool) -> str:
    return "[green]yes[/green]" if enabled else "[red]no[/red]"


def _show(experiments: CommonExperiments, name: str, console: Console) -> int:
    value = experiments.try_get(name)
    if value is None:
        console.print(f"Unknown flag '{name}'")
        return 1

    if isinstance(value, ExperimentalFlag):
        console.print(f"{value.name} ({value.id}): {_format_enabled(value.enabled)}")
        return 0

    canonical = experiments.resolve(value)
    if canonical is None:
        console.print(f"{value.name} -> {value.target_name}: [red]dangling alias[/red]")
        return 1
    console.print(
        f"{value.name} -> {canonical.name} ({canonical.id}): {_format_enabled(canonical.enabled)}"
    )
    return 0


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    console = console or Console()

    try:
        cls = load_experiments_class(args.experiments)
    except ExperimentsLoadError as e:
        parser.error(str(e))

    config = ExperimentsConfig(
        config_path=args.config or default_config_path(cls.__name__),
        autoload=True,
        autosave=True,
    )
    experiments = cls(config)

    if args.command == "list":
        console.print(render_flags(experiments))
        return 0

    if args.command == "show":
        return _show(experiments, args.name, console)

    enabled = args.command == "enable"
    if not experiments.try_set(args.name, enabled):
        console.print(f"[red]Cannot {args.command} '{args.name}': no such flag[/red]")
        return 1

    console.print(f"{args.name}: {_format_enabled(enabled)}")
    return 0
