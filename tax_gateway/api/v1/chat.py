"""POST /api/v1/chat - Tax assistant backed by Gemini"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from tax_gateway.api.v1.schemas import ChatRequest, ChatResponse
from tax_gateway.api.dependencies import enforce_chat_rate_limit, get_chat_client, get_request_id, get_result_store
from tax_gateway.domain.chat import build_chat_history
from tax_gateway.domain.exceptions import ChatNotConfiguredError, ChatServiceError, ResultStoreError
from tax_gateway.domain.store import ResultStore
from tax_gateway.infrastructure.clients.gemini import GeminiClient
from tax_gateway.infrastructure.observability.metrics import chat_request_counter, store_failures_counter

router = APIRouter()


@router.post("/chat", response_model=ChatResponse, dependencies=[Depends(enforce_chat_rate_limit)])
async def start_chat(
    request_body: ChatRequest,
    request: Request,
    store: ResultStore = Depends(get_result_store),
    chat_client: GeminiClient = Depends(get_chat_client),
):
    """
    Answer a question about Nigeria's 2026 tax reforms.

    When the user ID matches a stored calculation, its figures are added to
    the instructions so the answer can refer to them.
    """
    request_id = get_request_id(request)

    try:
        tax_context = await store.get(request_body.user_id)
    except ResultStoreError as e:
        store_failures_counter.labels(operation="get").inc()
        chat_request_counter.labels(outcome="failed").inc()
        logging.error(f"Tax context lookup failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail=f"Unable to load tax context for user: {request_body.user_id}")

    history = build_chat_history(tax_context)

    try:
        reply = await chat_client.send_message(history, request_body.prompt)
    except ChatNotConfiguredError as e:
        chat_request_counter.labels(outcome="failed").inc()
        logging.error(f"Chat not configured: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Chat service is not configured")
    except ChatServiceError as e:
        chat_request_counter.labels(outcome="failed").inc()
        logging.error(f"Chat service error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="AI service unavailable")

    chat_request_counter.labels(outcome="answered").inc()
    logging.info(
        "Chat answered",
        extra={"request_id": request_id, "step": "chat_complete", "with_context": tax_context is not None},
    )
    return ChatResponse(success=True, ai_response=reply)
