"""Slash command registry."""

import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterator, Mapping, Optional, Union

from wadjet.exceptions import UnrecognizedCommandError
from wadjet.slash_commands.models import Reply

logger = logging.getLogger(__name__)

# (context, parser, args) -> optional reply; may be sync or async
CommandHandler = Callable[..., Union[Optional[Reply], Awaitable[Optional[Reply]]]]


def normalize_name(name: str) -> str:
    """Strip a leading slash and lower-case a command name."""
    return name.strip().lstrip("/").lower()


class CommandRegistry:
    """Read-only mapping of command name to handler.

    Built once at startup and shared by every request. There is no way to
    add or remove commands afterwards.
    """

    def __init__(self, commands: Mapping[str, CommandHandler]):
        entries: dict[str, CommandHandler] = {}
        for name, handler in commands.items():
            key = normalize_name(name)
            if not key:
                raise ValueError(f"Invalid command name: {name!r}")
            if key in entries:
                raise ValueError(f"Duplicate command name: {key}")
            if not callable(handler):
                raise ValueError(f"Handler for {key} is not callable: {handler!r}")
            entries[key] = handler
        self._commands = MappingProxyType(entries)
        logger.debug(f"Registered commands: {', '.join(sorted(entries))}")

    @property
    def commands(self) -> Mapping[str, CommandHandler]:
        return self._commands

    def lookup(self, name: str) -> CommandHandler:
        """Return the handler registered for ``name``.

        Raises:
            UnrecognizedCommandError: No such command
        """
        key = normalize_name(name)
        try:
            return self._commands[key]
        except KeyError:
            raise UnrecognizedCommandError(key)

    def names(self) -> list[str]:
        return sorted(self._commands)

    def __contains__(self, name: Any) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._commands

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)


def default_registry() -> CommandRegistry:
    """Build the registry of built-in commands."""
    from wadjet.slash_commands.handlers import BUILTIN_COMMANDS

    return CommandRegistry(BUILTIN_COMMANDS)
