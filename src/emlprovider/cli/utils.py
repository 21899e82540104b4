"""Shared CLI utilities and helpers."""

import logging
import sys
from functools import wraps
from pathlib import Path

import click
from rich.logging import RichHandler

from ..accounts import ConfigAccountRegistry
from ..config import find_root, get_root, load_config
from ..provider import EmailProvider


def err(*args, **kwargs):
    """Print to stderr."""
    print(*args, file=sys.stderr, **kwargs)


def has_config(root: Path | None = None) -> bool:
    """Check if project has config.yaml."""
    root = root or find_root()
    if not root:
        return False
    return (root / ".eml" / "config.yaml").exists()


def setup_logging(verbose: int) -> None:
    """Route library logging through rich; -v for info, -vv for debug."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def get_provider(root: Path | None = None) -> tuple[EmailProvider, ConfigAccountRegistry]:
    """Build a provider over the current project's accounts."""
    root = root or get_root()
    config = load_config(root)
    registry = ConfigAccountRegistry(config, root)
    return EmailProvider(registry, authority=config.authority), registry


# =============================================================================
# Decorators and Click helpers
# =============================================================================


def require_init(f):
    """Decorator that requires .eml/config.yaml to exist."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not has_config():
            err("Not in an eml project. Run 'emlp init' first.")
            sys.exit(1)
        return f(*args, **kwargs)
    return wrapper


class AliasGroup(click.Group):
    """Click Group that supports command aliases."""

    def __init__(self, *args, aliases: dict[str, str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.aliases = aliases or {}
        # Build reverse mapping: command -> list of aliases
        self._cmd_aliases: dict[str, list[str]] = {}
        for alias, cmd in self.aliases.items():
            self._cmd_aliases.setdefault(cmd, []).append(alias)

    def get_command(self, ctx, cmd_name):
        cmd_name = self.aliases.get(cmd_name, cmd_name)
        return super().get_command(ctx, cmd_name)

    def resolve_command(self, ctx, args):
        _, cmd_name, args = super().resolve_command(ctx, args)
        cmd_name = self.aliases.get(cmd_name, cmd_name)
        return _, cmd_name, args

    def format_commands(self, ctx, formatter):
        """Write all commands with their aliases to the formatter."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            aliases = self._cmd_aliases.get(subcommand, [])
            if aliases:
                name = f"{subcommand} ({', '.join(sorted(aliases))})"
            else:
                name = subcommand
            help_text = cmd.get_short_help_str(limit=formatter.width)
            commands.append((name, help_text))

        if commands:
            with formatter.section("Commands"):
                formatter.write_dl(commands)
