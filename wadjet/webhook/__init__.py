"""Webhook server for Slack slash command callbacks."""

from wadjet.webhook.auth import SignatureVerifier, sign
from wadjet.webhook.config import WebhookSettings
from wadjet.webhook.server import create_app

__all__ = ["SignatureVerifier", "WebhookSettings", "create_app", "sign"]
