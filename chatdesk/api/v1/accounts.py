"""Account setup REST API routes - V1."""

from fastapi import APIRouter, HTTPException, Depends

from ...container import Container
from ...db import AccountRepository, ContactRepository, InboxRepository, UserRepository
from ...db.database_models import AccountDO, ContactDO, InboxDO, UserDO
from ...models.account import (
    CreateAccountRequest,
    AccountResponse,
    CreateUserRequest,
    UserResponse,
    CreateInboxRequest,
    InboxResponse,
    AddInboxMemberRequest,
    CreateContactRequest,
    ContactResponse,
)
from ..deps import get_container, get_current_user

router = APIRouter(prefix="/api/v1/accounts", tags=["Accounts"])


def _require_administrator(user: UserDO):
    if not user.is_administrator:
        raise HTTPException(status_code=403, detail="Administrator role required")


@router.post("", response_model=AccountResponse, status_code=201)
async def create_account(
    request: CreateAccountRequest,
    services: Container = Depends(get_container)
):
    """Create an account."""
    with services.db.transaction() as conn:
        account = AccountRepository(conn).create(AccountDO(name=request.name))
    return AccountResponse(id=account.id, name=account.name, created_at=account.created_at)


@router.post("/{account_id}/users", response_model=UserResponse, status_code=201)
async def create_user(
    account_id: int,
    request: CreateUserRequest,
    services: Container = Depends(get_container)
):
    """Create a user. The first user of an account is created without an acting user."""
    with services.db.transaction() as conn:
        if AccountRepository(conn).get(account_id) is None:
            raise HTTPException(status_code=404, detail=f"Account not found: {account_id}")
        user = UserRepository(conn).create(UserDO(
            account_id=account_id,
            name=request.name,
            email=request.email,
            role=request.role.value
        ))
    return UserResponse(id=user.id, account_id=user.account_id, name=user.name, email=user.email, role=user.role)


@router.post("/{account_id}/inboxes", response_model=InboxResponse, status_code=201)
async def create_inbox(
    account_id: int,
    request: CreateInboxRequest,
    user: UserDO = Depends(get_current_user),
    services: Container = Depends(get_container)
):
    """Create an inbox."""
    _require_administrator(user)
    with services.db.transaction() as conn:
        inbox = InboxRepository(conn).create(InboxDO(
            account_id=account_id,
            name=request.name,
            channel_type=request.channel_type
        ))
    return InboxResponse(id=inbox.id, account_id=inbox.account_id, name=inbox.name, channel_type=inbox.channel_type)


@router.post("/{account_id}/inboxes/{inbox_id}/members", response_model=dict, status_code=201)
async def add_inbox_member(
    account_id: int,
    inbox_id: int,
    request: AddInboxMemberRequest,
    user: UserDO = Depends(get_current_user),
    services: Container = Depends(get_container)
):
    """Add an agent to the inbox pool."""
    _require_administrator(user)
    with services.db.transaction() as conn:
        inbox = InboxRepository(conn).get(inbox_id)
        agent = UserRepository(conn).get(request.user_id)
    if inbox is None or inbox.account_id != account_id:
        raise HTTPException(status_code=404, detail=f"Inbox not found: {inbox_id}")
    if agent is None or agent.account_id != account_id:
        raise HTTPException(status_code=404, detail=f"User not found: {request.user_id}")

    added = services.round_robin.add_agent(inbox_id, agent.id)
    return {"inbox_id": inbox_id, "user_id": agent.id, "added": added}


@router.delete("/{account_id}/inboxes/{inbox_id}/members/{user_id}", response_model=dict)
async def remove_inbox_member(
    account_id: int,
    inbox_id: int,
    user_id: int,
    user: UserDO = Depends(get_current_user),
    services: Container = Depends(get_container)
):
    """Remove an agent from the inbox pool."""
    _require_administrator(user)
    with services.db.transaction() as conn:
        inbox = InboxRepository(conn).get(inbox_id)
    if inbox is None or inbox.account_id != account_id:
        raise HTTPException(status_code=404, detail=f"Inbox not found: {inbox_id}")
    if not services.round_robin.remove_agent(inbox_id, user_id):
        raise HTTPException(status_code=404, detail=f"User {user_id} is not a member of inbox {inbox_id}")
    return {"inbox_id": inbox_id, "user_id": user_id, "removed": True}


@router.post("/{account_id}/contacts", response_model=ContactResponse, status_code=201)
async def create_contact(
    account_id: int,
    request: CreateContactRequest,
    user: UserDO = Depends(get_current_user),
    services: Container = Depends(get_container)
):
    """Create a contact."""
    with services.db.transaction() as conn:
        contact = ContactRepository(conn).create(ContactDO(
            account_id=account_id,
            name=request.name,
            email=request.email,
            phone_number=request.phone_number
        ))
    return ContactResponse(
        id=contact.id,
        account_id=contact.account_id,
        name=contact.name,
        email=contact.email,
        phone_number=contact.phone_number
    )
