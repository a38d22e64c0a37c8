"""Slash command parsing, registry and dispatch."""

from wadjet.slash_commands.dispatcher import CommandContext, Dispatcher, InvocationResult
from wadjet.slash_commands.flags import CommandArgumentParser
from wadjet.slash_commands.models import Reply, SlashCommand
from wadjet.slash_commands.parser import parse_slash_command
from wadjet.slash_commands.registry import CommandRegistry, default_registry
from wadjet.slash_commands.tokenizer import split_arguments

__all__ = [
    "CommandArgumentParser",
    "CommandContext",
    "CommandRegistry",
    "Dispatcher",
    "InvocationResult",
    "Reply",
    "SlashCommand",
    "default_registry",
    "parse_slash_command",
    "split_arguments",
]
