"""Built-in slash command handlers.

A handler receives a ``CommandContext``, a fresh ``CommandArgumentParser``
and the tokenized arguments. It returns a ``Reply`` to answer with a
structured message, or ``None`` to answer with whatever it wrote to
``parser.output`` (nothing written means an empty acknowledgement).
"""

import logging
from typing import Optional

from wadjet.slash_commands.dispatcher import CommandContext
from wadjet.slash_commands.flags import CommandArgumentParser
from wadjet.slash_commands.models import EPHEMERAL, IN_CHANNEL, Reply

logger = logging.getLogger(__name__)


async def show_args(
    ctx: CommandContext,
    parser: CommandArgumentParser,
    args: list[str],
) -> Optional[Reply]:
    """Echo the parsed arguments back as diagnostic text."""
    parser.description = "Print the arguments the command was invoked with."
    parser.add_argument("args", nargs="*", help="arguments to print")
    parsed = parser.parse_args(args)

    parser.output.write(f"Args: {parsed.args}")
    return None


async def echo_command(
    ctx: CommandContext,
    parser: CommandArgumentParser,
    args: list[str],
) -> Optional[Reply]:
    """Repeat the given words as a message."""
    parser.description = "Repeat the given words as a message."
    parser.add_argument(
        "-c", "--in-channel",
        action="store_true",
        help="post the message to the whole channel",
    )
    parser.add_argument("words", nargs="+", help="words to repeat")
    parsed = parser.parse_args(args)

    logger.info(f"echo requested by {ctx.command.user_name or ctx.command.user_id or 'unknown'}")
    return Reply(
        text=" ".join(parsed.words),
        response_type=IN_CHANNEL if parsed.in_channel else EPHEMERAL,
    )


BUILTIN_COMMANDS = {
    "test": show_args,
    "echo": echo_command,
}
