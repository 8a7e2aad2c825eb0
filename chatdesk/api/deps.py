"""Shared FastAPI dependencies."""

from typing import Optional
from fastapi import Depends, Header, HTTPException

from ..container import Container
from ..context import RequestContext
from ..db import UserRepository
from ..db.database_models import ConversationDO, UserDO


# Service container (set by main.py)
container: Container = None


def get_container() -> Container:
    """Dependency to get the service container."""
    if container is None:
        raise HTTPException(status_code=500, detail="Services not initialized")
    return container


def get_current_user(
    account_id: int,
    x_user_id: Optional[int] = Header(None, description="Acting user"),
    services: Container = Depends(get_container)
) -> UserDO:
    """Resolve the acting user of the account from the X-User-Id header."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    with services.db.transaction() as conn:
        user = UserRepository(conn).get(x_user_id)
    if user is None or user.account_id != account_id:
        raise HTTPException(status_code=401, detail=f"Unknown user for account {account_id}: {x_user_id}")
    return user


def get_request_context(user: UserDO = Depends(get_current_user)) -> RequestContext:
    """One context per request, discarded with it."""
    return RequestContext(actor=user)


def get_conversation(
    account_id: int,
    display_id: int,
    user: UserDO = Depends(get_current_user),
    services: Container = Depends(get_container)
) -> ConversationDO:
    """Dependency to get a conversation of the account by display id."""
    conversation = services.conversations.get_by_display_id(account_id, display_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail=f"Conversation not found: {display_id}")
    return conversation
