"""Slash command dispatch."""

import inspect
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from wadjet.exceptions import CommandError, HelpRequested, HTTPError
from wadjet.slash_commands.flags import CommandArgumentParser
from wadjet.slash_commands.models import Reply, SlashCommand
from wadjet.slash_commands.registry import CommandRegistry, normalize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandContext:
    """Per-invocation data passed to command handlers."""

    command: SlashCommand
    name: str
    request: Optional[Request] = None

    async def cancelled(self) -> bool:
        """Return True once the client that sent the request has gone away."""
        if self.request is None:
            return False
        return await self.request.is_disconnected()


@dataclass
class InvocationResult:
    """Outcome of a successful command invocation."""

    command: SlashCommand
    output: str = ""
    reply: Optional[Reply] = None
    help_requested: bool = False


class Dispatcher:
    """Runs slash commands from a registry."""

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    async def dispatch(
        self,
        command: SlashCommand,
        args: list[str],
        request: Optional[Request] = None,
    ) -> InvocationResult:
        """Look up and run the handler for ``command``.

        Args:
            command: Parsed slash command
            args: Tokenized command text
            request: HTTP request the command arrived on, if any

        Returns:
            InvocationResult with captured output and optional reply

        Raises:
            UnrecognizedCommandError: No handler is registered for the name
            CommandError: The handler failed
            HTTPError: The handler aborted the request with its own status
        """
        name = normalize_name(command.name)
        handler = self.registry.lookup(name)

        parser = CommandArgumentParser(prog=f"/{name}")
        ctx = CommandContext(command=command, name=name, request=request)

        result = InvocationResult(command=command)
        try:
            if inspect.iscoroutinefunction(handler):
                reply = await handler(ctx, parser, args)
            else:
                # Plain functions may block; keep them off the event loop
                reply = await run_in_threadpool(handler, ctx, parser, args)
                if inspect.isawaitable(reply):
                    reply = await reply
            result.reply = reply
        except HelpRequested:
            result.help_requested = True
        except HTTPError:
            raise
        except Exception as e:
            logger.warning(
                f"AUDIT: Slash command failed - {name}: {e}",
                extra={
                    "event_type": "slash_command_failed",
                    "command": name,
                    "user_id": command.user_id,
                    "channel_id": command.channel_id,
                },
            )
            raise CommandError(command.command, e)

        if result.reply is not None and not isinstance(result.reply, Reply):
            raise CommandError(
                command.command,
                TypeError(f"handler returned {type(result.reply).__name__}, expected Reply or None"),
            )

        result.output = parser.getvalue()
        return result
