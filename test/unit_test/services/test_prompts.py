"""
Unit tests for prompt template rendering and the prompt service.
"""

import pytest

from corporate_advisor.core.database.entities import Prompt
from corporate_advisor.core.errors import AIServiceError
from corporate_advisor.services.prompts import (
    PromptService,
    format_additional_request,
    format_file_list,
    format_industry,
    render_template,
)


class TestRenderTemplate:
    def test_substitutes_variables(self):
        assert render_template("회사: {{companyName}}", {"companyName": "ACME"}) == "회사: ACME"

    def test_whitespace_inside_braces(self):
        assert render_template("{{ name }}", {"name": "x"}) == "x"

    def test_unknown_placeholder_is_kept(self):
        assert render_template("{{missing}}", {}) == "{{missing}}"

    def test_none_renders_empty(self):
        assert render_template("[{{industry}}]", {"industry": None}) == "[]"

    def test_if_block_kept_when_value_present(self):
        template = "A{{#if industry}} - 업종: {{industry}}{{/if}}B"
        assert render_template(template, {"industry": "제조"}) == "A - 업종: 제조B"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_if_block_removed_when_empty(self, value):
        template = "A{{#if industry}} - 업종: {{industry}}{{/if}}B"
        assert render_template(template, {"industry": value}) == "AB"


class TestFormatters:
    def test_format_industry(self):
        assert format_industry("제조업") == "**업종:** 제조업"
        assert format_industry(None) == ""

    def test_format_file_list(self):
        assert format_file_list(["a.pdf", "b.xlsx"]) == "- a.pdf\n- b.xlsx"

    def test_format_additional_request(self):
        assert format_additional_request("세무 중심") == "\n**추가 분석 요청사항:**\n세무 중심\n"
        assert format_additional_request("x", heading="추가 정보") == "\n**추가 정보:**\nx\n"
        assert format_additional_request("  ") == ""


class TestPromptService:
    async def test_render_stored_prompt(self, session):
        session.add(Prompt(name="greeting", content="안녕하세요 {{name}}님"))
        await session.commit()
        assert await PromptService(session).render("greeting", {"name": "홍길동"}) == "안녕하세요 홍길동님"

    async def test_missing_prompt_raises(self, session):
        with pytest.raises(AIServiceError):
            await PromptService(session).render("unknown", {})

    async def test_inactive_prompt_raises(self, session):
        session.add(Prompt(name="off", content="x", is_active=False))
        await session.commit()
        with pytest.raises(AIServiceError):
            await PromptService(session).render("off", {})
