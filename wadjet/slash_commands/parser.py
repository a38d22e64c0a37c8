"""Slash command parser."""

import logging
from urllib.parse import parse_qsl

from pydantic import ValidationError

from wadjet.exceptions import InvalidSlashRequestError
from wadjet.slash_commands.models import SlashCommand

logger = logging.getLogger(__name__)


def parse_slash_command(body: bytes) -> SlashCommand:
    """Parse a form-encoded slash command body.

    Args:
        body: Raw ``application/x-www-form-urlencoded`` request body

    Returns:
        SlashCommand

    Raises:
        InvalidSlashRequestError: Body is not form data or lacks a command
    """
    try:
        pairs = parse_qsl(
            body.decode("utf-8"),
            keep_blank_values=True,
            strict_parsing=True,
            errors="strict",
        )
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidSlashRequestError(f"malformed form body: {e}")

    # First value wins for repeated fields
    fields: dict[str, str] = {}
    for key, value in pairs:
        fields.setdefault(key, value)

    if not fields.get("command", "").strip():
        raise InvalidSlashRequestError("missing command field")

    try:
        return SlashCommand.model_validate(fields)
    except ValidationError as e:
        raise InvalidSlashRequestError(str(e))
