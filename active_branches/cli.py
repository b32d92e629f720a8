"""Click-based CLI entrypoint for active-git-branches.

All commands are implemented as Click subcommands with lazy loading.
Unknown commands raise an error.
"""

from __future__ import annotations

import importlib
import sys

import click

from active_branches import __version__
from active_branches.utils import configure_verbosity


# ---------------------------------------------------------------------------
# Custom Click Group
# ---------------------------------------------------------------------------


_LAZY_COMMANDS: dict[str, tuple[str, str]] = {
    "check": ("active_branches.commands.check", "check"),
    "default": ("active_branches.commands.default", "default"),
    "list": ("active_branches.commands.list_cmd", "list_cmd"),
    "validate": ("active_branches.commands.validate_cmd", "validate_cmd"),
}


class BranchesGroup(click.Group):
    """Click group that imports command modules on first access."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return all available command names (eager + lazy)."""
        eager = set(self.commands or {})
        return sorted(eager | _LAZY_COMMANDS.keys())

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Look up a command, importing lazily if needed."""
        cmd = self.commands.get(cmd_name)
        if cmd is not None:
            return cmd

        entry = _LAZY_COMMANDS.get(cmd_name)
        if entry is None:
            return None

        module_path, attr_name = entry
        mod = importlib.import_module(module_path)
        loaded_cmd: click.Command = getattr(mod, attr_name)
        # Cache so subsequent lookups skip the import
        self.add_command(loaded_cmd, cmd_name)
        return loaded_cmd

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        """Resolve a command name, failing with a hint for unknown ones."""
        if not args:
            return super().resolve_command(ctx, args)

        cmd_name = args[0]
        cmd_obj = self.get_command(ctx, cmd_name)
        if cmd_obj is not None:
            return cmd_name, cmd_obj, list(args[1:])

        ctx.fail(
            f"Unknown command '{cmd_name}'. Run 'active-branches --help' for available commands."
        )


# ---------------------------------------------------------------------------
# Main CLI Group
# ---------------------------------------------------------------------------


@click.group(cls=BranchesGroup, invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Report which strategy was used and why")
@click.version_option(__version__, prog_name="active-branches")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """List the most recently active branches of a git repository."""
    ctx.ensure_object(dict)
    configure_verbosity(verbose)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Entry Point
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the CLI.

    Usage errors (bad flags, missing required args) are normalised to
    exit code 1. Click's default for ``UsageError`` is exit code 2.
    """
    try:
        result = cli(standalone_mode=False)
    except click.UsageError as exc:
        click.echo(f"Error: {exc.format_message()}", err=True)
        sys.exit(1)
    except click.Abort:
        sys.exit(130)
    if isinstance(result, int):
        sys.exit(result)


if __name__ == "__main__":
    main()
