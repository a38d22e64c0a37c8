"""Slash command request and reply models."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

EPHEMERAL = "ephemeral"
IN_CHANNEL = "in_channel"


class SlashCommand(BaseModel):
    """Slash command payload sent by the chat platform."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    command: str
    text: str = ""
    token: str = ""
    team_id: str = ""
    team_domain: str = ""
    enterprise_id: str = ""
    enterprise_name: str = ""
    channel_id: str = ""
    channel_name: str = ""
    user_id: str = ""
    user_name: str = ""
    response_url: str = ""
    trigger_id: str = ""
    api_app_id: str = ""

    @property
    def name(self) -> str:
        """Command name without its leading slash."""
        return self.command.lstrip("/")


class Reply(BaseModel):
    """Response message for a slash command."""

    text: str
    response_type: Literal["ephemeral", "in_channel"] = EPHEMERAL
    username: Optional[str] = None
    icon_url: Optional[str] = None
    attachments: Optional[list[dict[str, Any]]] = None
    blocks: Optional[list[dict[str, Any]]] = None
