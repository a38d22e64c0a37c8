"""Wadjet: authenticated slash-command webhook service."""

__version__ = "0.1.0"
