"""Argument parsing for slash command handlers."""

import argparse
import io
import sys
from typing import NoReturn, Optional, TextIO

from wadjet.exceptions import CommandUsageError, HelpRequested


class CommandArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports instead of exiting.

    Usage, help and error text is written to ``output`` rather than to
    stdout/stderr. ``--help`` raises ``HelpRequested`` and parse errors
    raise ``CommandUsageError`` where a stock parser would call ``sys.exit``.
    One instance serves exactly one command invocation.
    """

    def __init__(self, prog: str, output: Optional[TextIO] = None, **kwargs):
        kwargs.setdefault("allow_abbrev", False)
        if sys.version_info >= (3, 14):
            # captured text is sent to chat, never to a terminal
            kwargs.setdefault("color", False)
        super().__init__(prog=prog, **kwargs)
        self.output = output if output is not None else io.StringIO()

    def _print_message(self, message: str, file: Optional[TextIO] = None) -> None:
        if message:
            self.output.write(message)

    def exit(self, status: int = 0, message: Optional[str] = None) -> NoReturn:
        if message:
            self._print_message(message)
        if status == 0:
            raise HelpRequested(self.prog)
        raise CommandUsageError((message or "").strip() or f"{self.prog}: invalid usage", status)

    def error(self, message: str) -> NoReturn:
        self.print_usage()
        self.exit(2, f"{self.prog}: error: {message}\n")

    def getvalue(self) -> str:
        """Return everything captured so far when ``output`` is a buffer."""
        if isinstance(self.output, io.StringIO):
            return self.output.getvalue()
        return ""
