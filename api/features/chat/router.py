"""Router for the Chat feature."""
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from api.di.container import ApplicationContainer as DependencyContainer
from api.features.chat.controller import ChatController
from api.features.chat.dtos import ChatRequest, ChatResponse, HistoryResponse
from api.shared.dtos import HealthCheckResponse

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse, response_model_exclude_none=True)
async def health_check():
    """Health check endpoint for the chat service."""
    return HealthCheckResponse(status="healthy", service="chat-api")


@router.post("/message", response_model=ChatResponse)
@inject
async def send_message(
    request: Optional[ChatRequest] = None,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    """Send a message and get the assistant's reply."""
    return await controller.send_message(request or ChatRequest())


@router.get("/history/{session_id}", response_model=HistoryResponse)
@inject
async def get_history(
    session_id: str,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
):
    """Get the full conversation history for a session."""
    return await controller.get_history(session_id)
