"""Shell-style splitting of slash command text."""

import shlex
from typing import Optional

from wadjet.exceptions import ArgumentParseError


def split_arguments(text: Optional[str]) -> list[str]:
    """Split command text into arguments using POSIX shell rules.

    ``a "b c" d`` becomes ``["a", "b c", "d"]``. Empty text yields no
    arguments.

    Raises:
        ArgumentParseError: Unbalanced quotes or a dangling escape
    """
    if not text:
        return []
    try:
        return shlex.split(text, comments=False, posix=True)
    except ValueError as e:
        raise ArgumentParseError(str(e).lower())
