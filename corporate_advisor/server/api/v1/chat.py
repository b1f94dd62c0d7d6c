"""
Consulting Chatbot Endpoint.
"""

from fastapi import APIRouter

from corporate_advisor.core.models.io.knowledge import ChatRequest, ChatResponse
from corporate_advisor.server.services.deps import CurrentUserDep, GeminiDep, SessionDep
from corporate_advisor.services.chat import ChatService

router = APIRouter()


@router.post(
    "",
    response_model=ChatResponse,
    summary="Ask Consulting Chatbot",
    description=(
        "Answer a corporate consulting question from the sourced knowledge base. "
        "``has_reliable_source`` is false when no knowledge entry matched the question."
    ),
    responses={400: {"description": "Empty message"}, 500: {"description": "Answer generation failed"}},
)
async def ask(data: ChatRequest, user: CurrentUserDep, session: SessionDep, gemini: GeminiDep) -> ChatResponse:
    return await ChatService(session, gemini).ask(data.message, data.history)
