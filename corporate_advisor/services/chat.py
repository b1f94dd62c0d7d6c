"""
Consulting chatbot.

Answers corporate tax and consulting questions from the knowledge base only
(retrieval-augmented generation). The best-matching active entries are put
into the prompt with their sources, and the model is told to admit when the
knowledge base does not cover a question.
"""

from __future__ import annotations

from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.ai.gemini import GeminiClient
from corporate_advisor.core.database.entities import ChatbotKnowledge
from corporate_advisor.core.errors import AIServiceError, BadRequestError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.io.knowledge import ChatMessage, ChatResponse, ChatSource
from corporate_advisor.services.knowledge import KnowledgeService, search_knowledge

logger = get_logger(__name__)

KNOWLEDGE_LIMIT = 5

BASE_SYSTEM_PROMPT = """당신은 법인컨설팅 전문 AI 어시스턴트입니다.

## 핵심 원칙 (매우 중요)

1. **출처 기반 답변만 제공**
   - 반드시 제공된 지식 베이스의 정보만을 기반으로 답변하세요
   - 답변 시 항상 출처를 명시하세요 (예: "[출처: 국세청, 법인세법 제55조]")
   - 출처가 없는 정보는 절대 추측하거나 지어내지 마세요

2. **불확실한 경우 솔직하게 모른다고 답변**
   - 지식 베이스에 관련 정보가 없으면: "죄송합니다. 해당 질문에 대한 신뢰할 수 있는 정보가 제 데이터베이스에 없습니다."
   - 부분적으로만 답변 가능하면: "일부 정보만 답변 가능합니다. [답변 가능한 부분]에 대해서만 안내드리겠습니다."
   - 정보가 오래되었을 수 있으면: "이 정보는 [날짜] 기준이며, 최신 법령은 전문가에게 확인하시기 바랍니다."

3. **전문가 상담 권장**
   - 복잡한 세무/법률 문제는 반드시 전문가 상담을 권장하세요
   - 구체적인 금액 계산이나 절세 전략은 세무사/회계사 상담 필요
   - 법적 분쟁이 예상되는 경우 변호사 상담 권장

4. **답변 형식**
   - 간결하고 명확하게 답변
   - 중요한 내용은 불릿 포인트로 정리
   - 숫자, 세율, 기한 등은 정확하게 명시
   - 답변 마지막에 출처를 명시

## 주의사항
- 세법/규정은 자주 변경되므로 항상 최신 정보 확인 필요 언급
- 개인의 상황에 따라 적용이 다를 수 있음을 안내
- 일반적인 정보 제공일 뿐 세무/법률 자문이 아님을 명시"""

WITH_KNOWLEDGE_SUFFIX = """## 참고할 수 있는 지식 베이스 정보

아래 정보를 기반으로 답변하세요. 아래 정보에 없는 내용은 답변하지 마세요.

{context}"""

WITHOUT_KNOWLEDGE_SUFFIX = """## 현재 상황
사용자의 질문과 관련된 정보가 지식 베이스에서 발견되지 않았습니다.
솔직하게 모른다고 답변하고, 전문가 상담을 권장해주세요."""


def build_knowledge_context(entries: Sequence[ChatbotKnowledge]) -> str:
    if not entries:
        return ""
    parts = ["=== 참고 자료 (지식 베이스) ===\n\n"]
    for entry in entries:
        block = f"[{entry.category} - {entry.subcategory or ''}]\n"
        block += f"질문: {entry.question}\n답변: {entry.answer}\n출처: {entry.source}\n"
        if entry.source_url:
            block += f"출처 URL: {entry.source_url}\n"
        block += f"최종 업데이트: {entry.last_updated}\n\n---\n\n"
        parts.append(block)
    return "".join(parts)


def build_system_prompt(entries: Sequence[ChatbotKnowledge]) -> str:
    if entries:
        suffix = WITH_KNOWLEDGE_SUFFIX.format(context=build_knowledge_context(entries))
    else:
        suffix = WITHOUT_KNOWLEDGE_SUFFIX
    return f"{BASE_SYSTEM_PROMPT}\n\n{suffix}"


class ChatService:
    def __init__(self, session: AsyncSession, gemini: GeminiClient) -> None:
        self.knowledge = KnowledgeService(session)
        self.gemini = gemini

    async def ask(self, message: str, history: Sequence[ChatMessage] = ()) -> ChatResponse:
        """Answer ``message`` from the active knowledge entries most relevant to it."""
        if not message or not message.strip():
            raise BadRequestError("메시지를 입력해주세요")

        relevant = search_knowledge(await self.knowledge.list_active(), message, KNOWLEDGE_LIMIT)
        prompt = f"{build_system_prompt(relevant)}\n\n사용자 질문: {message}"

        try:
            answer = await self.gemini.chat(prompt, [(m.role, m.content) for m in history])
        except Exception as e:
            logger.error(f"Chat answer failed: {e}")
            raise AIServiceError("답변 생성 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요.") from e

        sources: List[ChatSource] = [
            ChatSource(category=e.category, source=e.source, source_url=e.source_url) for e in relevant
        ]
        logger.info(f"Chat answered with {len(relevant)} knowledge entries")
        return ChatResponse(answer=answer, sources=sources or None, has_reliable_source=bool(relevant))
