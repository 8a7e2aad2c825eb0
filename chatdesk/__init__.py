"""Conversation lifecycle and assignment engine for a customer-support inbox."""

__version__ = "1.0.0"
