"""Click group that resolves its subcommands by import path."""

from __future__ import annotations

from typing import Any

import click


class LazyGroup(click.Group):
    """A Click group whose subcommands are "module:attr" import paths.

    Command modules pull in the analyzer and watchfiles, so a command is
    resolved only when it is invoked or its help is shown. Resolution goes
    through the same loader as the engine factories in the config.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(set(super().list_commands(ctx)) | set(self._lazy_subcommands))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None or cmd_name not in self._lazy_subcommands:
            return cmd

        from changelens.config import load_component
        from changelens.errors import ConfigError

        try:
            loaded = load_component(self._lazy_subcommands[cmd_name])
        except ConfigError as e:
            raise click.ClickException(f"Command '{cmd_name}' is unavailable: {e.message}") from None
        if not isinstance(loaded, click.Command):
            raise click.ClickException(f"Command '{cmd_name}' resolved to {type(loaded).__name__}, not a command")

        # Later lookups hit click's own registry
        self.add_command(loaded, cmd_name)
        return loaded


__all__ = ["LazyGroup"]
