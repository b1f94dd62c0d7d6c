"""
Prompt templates stored in the database.

Templates use ``{{name}}`` placeholders and ``{{#if name}}...{{/if}}`` blocks
that are kept only when the variable is non-empty.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database.repositories import PromptRepository
from corporate_advisor.core.errors import AIServiceError
from corporate_advisor.core.logging_config import get_logger

logger = get_logger(__name__)

_IF_BLOCK_RE = re.compile(r"\{\{#if\s+(\w+)\s*\}\}([\s\S]*?)\{\{/if\}\}")
_VARIABLE_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def render_template(template: str, variables: Mapping[str, Optional[str]]) -> str:
    """Render conditional blocks, then substitute placeholders. Unknown placeholders are left untouched."""

    def _if_block(match: re.Match) -> str:
        value = variables.get(match.group(1))
        return match.group(2) if value and str(value).strip() else ""

    rendered = _IF_BLOCK_RE.sub(_if_block, template)

    def _variable(match: re.Match) -> str:
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        value = variables[name]
        return "" if value is None else str(value)

    return _VARIABLE_RE.sub(_variable, rendered)


def format_industry(industry: Optional[str]) -> str:
    return f"**업종:** {industry}" if industry else ""


def format_file_list(filenames: Iterable[str]) -> str:
    return "\n".join(f"- {name}" for name in filenames)


def format_additional_request(request: Optional[str], heading: str = "추가 분석 요청사항") -> str:
    if not request or not request.strip():
        return ""
    return f"\n**{heading}:**\n{request}\n"


class PromptService:
    """Loads prompt templates by name and renders them."""

    def __init__(self, session: AsyncSession) -> None:
        self.prompts = PromptRepository(session)

    async def render(self, name: str, variables: Dict[str, Optional[str]]) -> str:
        prompt = await self.prompts.get_by_name(name)
        if prompt is None or not prompt.is_active:
            logger.error(f"Prompt not found or inactive: {name}")
            raise AIServiceError(f"프롬프트를 찾을 수 없습니다: {name}")
        return render_template(prompt.content, variables)
