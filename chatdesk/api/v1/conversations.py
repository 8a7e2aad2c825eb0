"""Conversation REST API routes - V1."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from ...container import Container
from ...context import RequestContext
from ...db.database_models import ConversationDO, ConversationStatus, UserDO
from ...errors import ValidationError
from ...models.conversation import (
    CreateConversationRequest,
    AssignmentRequest,
    UpdateLastSeenRequest,
    ConversationCountsMeta,
    ConversationListData,
    ConversationListResponse,
    ToggleStatusResponse,
    LockResponse,
)
from ...services.conversation_finder import ConversationFinder
from ...services.presenters import conversation_push_data, lock_event_data
from ..deps import get_container, get_conversation, get_current_user, get_request_context

router = APIRouter(prefix="/api/v1/accounts/{account_id}/conversations", tags=["Conversations"])


def _push_data(services: Container, conversation: ConversationDO) -> dict:
    with services.db.transaction() as conn:
        return conversation_push_data(conn, conversation)


def _reload(services: Container, conversation: ConversationDO) -> ConversationDO:
    return services.conversations.get(conversation.id) or conversation


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    account_id: int,
    inbox_id: Optional[int] = Query(None, description="Restrict to one inbox"),
    assignee_type_id: Optional[str] = Query(None, description="0 = mine, 1 = unassigned, 2 = all"),
    status: Optional[str] = Query(None, description="open, resolved or pending"),
    page: Optional[int] = Query(None, ge=1, description="1-based page"),
    user: UserDO = Depends(get_current_user),
    services: Container = Depends(get_container)
):
    """List the conversations visible to the caller with the three badge counts."""
    try:
        finder = ConversationFinder(
            services.db,
            user,
            inbox_id=inbox_id,
            assignee_type_id=assignee_type_id,
            status=status,
            page=page,
            per_page=services.settings.conversations_per_page
        )
    except (KeyError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown status: {status}")

    result = finder.perform()
    return ConversationListResponse(
        data=ConversationListData(
            meta=ConversationCountsMeta(
                mine_count=result.counts.mine,
                unassigned_count=result.counts.unassigned,
                all_count=result.counts.all
            ),
            payload=[_push_data(services, c) for c in result.conversations]
        )
    )


@router.post("", response_model=dict, status_code=201)
async def create_conversation(
    account_id: int,
    request: CreateConversationRequest,
    context: RequestContext = Depends(get_request_context),
    services: Container = Depends(get_container)
):
    """Create a conversation; unassigned ones go through round robin."""
    try:
        conversation = services.conversations.create_conversation(
            context,
            account_id=account_id,
            inbox_id=request.inbox_id,
            contact_id=request.contact_id,
            assignee_id=request.assignee_id,
            status=ConversationStatus.parse(request.status)
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return _push_data(services, conversation)


@router.get("/{display_id}", response_model=dict)
async def get_conversation_details(
    conversation: ConversationDO = Depends(get_conversation),
    services: Container = Depends(get_container)
):
    """Get the push payload of a conversation."""
    return _push_data(services, conversation)


@router.post("/{display_id}/toggle_status", response_model=ToggleStatusResponse)
async def toggle_status(
    conversation: ConversationDO = Depends(get_conversation),
    context: RequestContext = Depends(get_request_context),
    services: Container = Depends(get_container)
):
    """Resolve an open conversation or reopen a resolved one."""
    success = services.conversations.toggle_status(context, conversation.id)
    current = _reload(services, conversation)
    return ToggleStatusResponse(success=success, current_status=current.status.label)


@router.post("/{display_id}/assignments", response_model=dict)
async def assign_conversation(
    request: AssignmentRequest,
    conversation: ConversationDO = Depends(get_conversation),
    context: RequestContext = Depends(get_request_context),
    services: Container = Depends(get_container)
):
    """Assign the conversation to an agent of its inbox."""
    try:
        success = services.conversations.update_assignee(context, conversation.id, request.assignee_id)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not success:
        raise HTTPException(status_code=500, detail="Failed to assign conversation")

    return _push_data(services, _reload(services, conversation))


@router.post("/{display_id}/lock", response_model=LockResponse)
async def lock_conversation(
    conversation: ConversationDO = Depends(get_conversation),
    context: RequestContext = Depends(get_request_context),
    services: Container = Depends(get_container)
):
    """Lock the conversation."""
    if not services.conversations.lock(context, conversation.id):
        raise HTTPException(status_code=500, detail="Failed to lock conversation")
    return lock_event_data(_reload(services, conversation))


@router.post("/{display_id}/unlock", response_model=LockResponse)
async def unlock_conversation(
    conversation: ConversationDO = Depends(get_conversation),
    context: RequestContext = Depends(get_request_context),
    services: Container = Depends(get_container)
):
    """Unlock the conversation."""
    if not services.conversations.unlock(context, conversation.id):
        raise HTTPException(status_code=500, detail="Failed to unlock conversation")
    return lock_event_data(_reload(services, conversation))


@router.post("/{display_id}/update_last_seen", response_model=dict)
async def update_last_seen(
    request: Optional[UpdateLastSeenRequest] = None,
    conversation: ConversationDO = Depends(get_conversation),
    context: RequestContext = Depends(get_request_context),
    services: Container = Depends(get_container)
):
    """Move the agent (default) or user read watermark to now."""
    viewer = request.viewer if request else "agent"
    success = services.conversations.mark_seen(context, conversation.id, viewer=viewer)
    return {"success": success, "viewer": viewer}
