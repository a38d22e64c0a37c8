"""Webhook server configuration."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebhookSettings(BaseSettings):
    """Webhook server settings, read from ``WADJET_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WADJET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="HTTP listen host")
    port: int = Field(default=8080, ge=0, le=65535, description="HTTP listen port")
    signing_secret: str = Field(
        default="",
        description="Slack signing secret; empty disables signature checks",
    )
    timestamp_tolerance: float = Field(
        default=300.0, ge=0, description="Allowed request timestamp skew in seconds"
    )
    path: str = Field(default="/v1/slack/slash", description="Slash command endpoint path")
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value.upper()), int):
            raise ValueError(f"unknown log level: {value}")
        return value.upper()


def deep_merge(base: dict, override: dict) -> None:
    """Merge override dict into base dict in-place (recursive)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value


def load_config(path: str) -> dict[str, Any]:
    """Load the ``webhook`` section of a YAML config file.

    A sibling ``<name>.local.yaml`` is merged over the file when present.
    """
    with open(path) as f:
        cfg = yaml.safe_load(f) or {}
    # Allow local overrides
    local = Path(path).with_suffix(".local.yaml")
    if local.exists():
        with open(local) as f:
            local_cfg = yaml.safe_load(f) or {}
        deep_merge(cfg, local_cfg)
    return cfg.get("webhook", {}) or {}


def parse_listen(listen: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address. An empty host means all interfaces."""
    host, sep, port = listen.rpartition(":")
    if not sep:
        raise ValueError(f"Invalid listen address: {listen!r}")
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"Invalid listen port: {port!r}")
    return host.strip("[]") or "0.0.0.0", port_num
