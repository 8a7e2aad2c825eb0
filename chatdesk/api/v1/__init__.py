"""API v1 routers."""

from . import accounts, conversations, messages

__all__ = ["accounts", "conversations", "messages"]
