"""
Conversation API endpoints - Drive the chat session over HTTP.
Every endpoint answers with the resulting session view.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from ..core import ConversationSessionManager
from ..core.navigation import ROOT_PATH, path_for
from ..models import RenameRequest, SendMessageRequest, SessionView, ShareResult

router = APIRouter(tags=["conversations"])
logger = logging.getLogger(__name__)


def get_session_manager(request: Request) -> ConversationSessionManager:
    """Session manager created at startup."""
    return request.app.state.session_manager


@router.get("/", response_model=SessionView)
async def home(manager: ConversationSessionManager = Depends(get_session_manager)):
    """Home view: no conversation selected."""
    manager.open(ROOT_PATH)
    return manager.view()


@router.get("/c/{conversation_id}", response_model=SessionView)
async def open_conversation(
    conversation_id: str,
    manager: ConversationSessionManager = Depends(get_session_manager)
):
    """
    Conversation view.

    Unknown conversations redirect to the home view.
    """
    manager.open(path_for(conversation_id))
    if manager.current_conversation_id != conversation_id:
        return RedirectResponse(url=ROOT_PATH, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return manager.view()


@router.post("/new", response_model=SessionView)
async def new_chat(manager: ConversationSessionManager = Depends(get_session_manager)):
    """Leave the current conversation; the next message starts a new one."""
    manager.new_chat()
    return manager.view()


@router.post("/messages", response_model=SessionView)
async def send_message(
    payload: SendMessageRequest,
    manager: ConversationSessionManager = Depends(get_session_manager)
):
    """
    Send a message to the current conversation.

    From the home view a new conversation is created first.
    """
    await manager.send_message(payload.text)
    return manager.view()


@router.post("/c/{conversation_id}/messages", response_model=SessionView)
async def send_message_to(
    conversation_id: str,
    payload: SendMessageRequest,
    manager: ConversationSessionManager = Depends(get_session_manager)
):
    """Select a conversation and send a message to it."""
    manager.select_conversation(conversation_id)
    if manager.current_conversation_id != conversation_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Conversation {conversation_id} not found"
        )
    await manager.send_message(payload.text)
    return manager.view()


@router.patch("/c/{conversation_id}", response_model=SessionView)
async def rename_conversation(
    conversation_id: str,
    payload: RenameRequest,
    manager: ConversationSessionManager = Depends(get_session_manager)
):
    """Rename a conversation. Blank titles leave it unchanged."""
    if not manager.registry.exists(conversation_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Conversation {conversation_id} not found"
        )
    manager.rename_conversation(conversation_id, payload.title)
    return manager.view()


@router.delete("/c/{conversation_id}", response_model=SessionView)
async def delete_conversation(
    conversation_id: str,
    manager: ConversationSessionManager = Depends(get_session_manager)
):
    """Delete a conversation and its messages."""
    if not manager.registry.exists(conversation_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Conversation {conversation_id} not found"
        )
    if not manager.delete_conversation(conversation_id, confirm=True):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Deletion was not confirmed")
    return manager.view()


@router.delete("/conversations", response_model=SessionView)
async def clear_conversations(manager: ConversationSessionManager = Depends(get_session_manager)):
    """Delete every conversation."""
    if not manager.clear_all_conversations(confirm=True):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Clearing was not confirmed")
    return manager.view()


@router.post("/c/{conversation_id}/share", response_model=ShareResult)
async def share_conversation(
    conversation_id: str,
    manager: ConversationSessionManager = Depends(get_session_manager)
):
    """Copy a conversation transcript to the clipboard."""
    if not manager.registry.exists(conversation_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Conversation {conversation_id} not found"
        )
    text = manager.share_conversation(conversation_id)
    return ShareResult(copied=text is not None, text=text)


@router.get("/conversations/export", response_class=PlainTextResponse)
async def export_conversations(manager: ConversationSessionManager = Depends(get_session_manager)):
    """Export conversation metadata as JSON."""
    return PlainTextResponse(manager.export_conversations(), media_type="application/json")


@router.post("/history/back", response_model=SessionView)
async def go_back(manager: ConversationSessionManager = Depends(get_session_manager)):
    manager.go_back()
    return manager.view()


@router.post("/history/forward", response_model=SessionView)
async def go_forward(manager: ConversationSessionManager = Depends(get_session_manager)):
    manager.go_forward()
    return manager.view()


@router.post("/sidebar/toggle", response_model=SessionView)
async def toggle_sidebar(manager: ConversationSessionManager = Depends(get_session_manager)):
    manager.toggle_sidebar()
    return manager.view()


@router.post("/error/dismiss", response_model=SessionView)
async def dismiss_error(manager: ConversationSessionManager = Depends(get_session_manager)):
    manager.clear_error()
    return manager.view()
