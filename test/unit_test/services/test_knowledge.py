"""
Unit tests for the chatbot knowledge base: chunking, keyword extraction,
search ranking, CRUD and PDF import.
"""

import io
import re

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from corporate_advisor.core.database.entities import ChatbotKnowledge
from corporate_advisor.core.errors import BadRequestError, NotFoundError
from corporate_advisor.core.models.io.knowledge import KnowledgeCreate, KnowledgeUpdate
from corporate_advisor.services.knowledge import (
    IMPORTANT_TERMS,
    MAX_KEYWORDS,
    MAX_PDF_SIZE,
    KnowledgeService,
    extract_keywords,
    search_knowledge,
    split_text_into_chunks,
)
from corporate_advisor.services.projects import IncomingFile


def _text_pdf(lines) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    y = 800
    for line in lines:
        pdf.drawString(50, y, line)
        y -= 20
    pdf.save()
    return buffer.getvalue()


def _entry(**overrides) -> ChatbotKnowledge:
    values = dict(
        category="법인세",
        subcategory="세율",
        question="법인세 세율은 어떻게 되나요?",
        answer="과세표준 2억원 이하 9%",
        source="국세청, 법인세법 제55조",
        keywords="법인세, 세율, 과세표준",
        last_updated="2024-01-01",
    )
    values.update(overrides)
    return ChatbotKnowledge(**values)


def _knowledge(**overrides) -> KnowledgeCreate:
    values = dict(
        category="법인세",
        question="법인세 신고 기한은?",
        answer="3월 31일까지",
        source="국세청",
        keywords="법인세, 신고",
        last_updated="2024-01",
    )
    values.update(overrides)
    return KnowledgeCreate(**values)


class TestSplitTextIntoChunks:
    def test_splits_at_numbered_headings(self):
        text = "안내 자료\n1. 법인세 세율\n법인세는 9% 입니다.\n2. 신고 기한\n3월 31일까지 신고합니다."

        chunks = split_text_into_chunks(text)

        assert [c.title for c in chunks] == ["안내 자료", "법인세 세율", "신고 기한"]
        assert chunks[1].text == "1. 법인세 세율\n법인세는 9% 입니다."

    def test_normalizes_line_breaks(self):
        chunks = split_text_into_chunks("제목\r\n\r\n\r\n\r\n본문")

        assert chunks[0].text == "제목\n\n본문"

    def test_long_section_is_packed_by_paragraph(self):
        text = "\n\n".join(["가" * 900] * 3)

        chunks = split_text_into_chunks(text, max_length=2000)

        assert [len(c.text) for c in chunks] == [1802, 900]
        assert all(c.title == "" for c in chunks)

    def test_oversized_paragraph_stays_whole(self):
        chunks = split_text_into_chunks("가" * 2500, max_length=2000)

        assert len(chunks) == 1
        assert len(chunks[0].text) == 2500

    def test_short_first_paragraph_titles_packed_chunk(self):
        text = "개요\n\n" + "\n\n".join(["나" * 900] * 3)

        chunks = split_text_into_chunks(text, max_length=2000)

        assert chunks[0].title == "개요"
        assert chunks[1].title == ""

    def test_blank_text(self):
        assert split_text_into_chunks("  \n\n ") == []


class TestExtractKeywords:
    def test_terms_in_table_order(self):
        assert extract_keywords("법인세 신고 기한은 3월 31일입니다") == ["법인세", "법인", "신고", "기한"]

    def test_figures_and_fallbacks(self):
        assert extract_keywords("세율은 9%입니다") == ["세율", "금액", "법인컨설팅", "세무"]

    def test_capped(self):
        assert len(extract_keywords(" ".join(IMPORTANT_TERMS))) == MAX_KEYWORDS


class TestSearchKnowledge:
    def test_ranks_by_relevance_and_drops_unrelated(self):
        tax = _entry()
        succession = _entry(
            category="가업승계", question="가업상속공제란?", answer="300억원 공제", keywords="가업승계, 상속공제"
        )
        filing = _entry(question="신고 기한은?", answer="3월 31일", keywords="신고, 기한")

        results = search_knowledge([succession, filing, tax], "법인세 세율")

        assert results == [tax, filing]

    def test_limit(self):
        entries = [_entry(question=f"법인세 질문 {i}") for i in range(7)]

        assert len(search_knowledge(entries, "법인세", limit=5)) == 5

    def test_no_match(self):
        assert search_knowledge([_entry()], "날씨") == []


class TestKnowledgeService:
    async def test_crud(self, session):
        service = KnowledgeService(session)
        entry = await service.create(_knowledge(subcategory="신고", source_url="https://www.nts.go.kr"))

        updated = await service.update(entry.id, KnowledgeUpdate(answer="3월 말", subcategory="", source_url=""))

        assert updated.answer == "3월 말"
        assert updated.subcategory is None
        assert updated.source_url is None
        assert updated.question == "법인세 신고 기한은?"

        await service.delete(entry.id)
        with pytest.raises(NotFoundError):
            await service.get(entry.id)

    async def test_list_groups_by_category(self, session):
        service = KnowledgeService(session)
        await service.create(_knowledge(category="법인세", subcategory="세율"))
        await service.create(_knowledge(category="가업승계"))
        await service.create(_knowledge(category="법인세", subcategory="기한", is_active=False))

        entries = await service.list()

        assert [(e.category, e.subcategory) for e in entries] == [
            ("가업승계", None),
            ("법인세", "기한"),
            ("법인세", "세율"),
        ]
        assert len(await service.list_active()) == 2

    async def test_delete_missing(self, session):
        with pytest.raises(NotFoundError):
            await KnowledgeService(session).delete("missing")


class TestIngestPdf:
    LINES = [
        "1. Corporate tax rates",
        "Rates range from 9% to 24% depending on the size of the tax base.",
        "2. Filing deadline",
        "Returns are due three months after the end of the fiscal year.",
    ]

    async def test_creates_entry_per_chunk(self, session):
        service = KnowledgeService(session)
        pdf = IncomingFile(filename="guide.pdf", content_type="application/pdf", data=_text_pdf(self.LINES))

        result = await service.ingest_pdf(pdf, "법인세", "국세청 안내서")

        entries = await service.list()
        assert result.success
        assert result.total_pages == 1
        assert result.entries_count == len(entries) >= 1
        assert result.message == f"PDF에서 {len(entries)}개의 지식 항목이 생성되었습니다."
        assert any(e.question == "Corporate tax rates" for e in entries)
        for entry in entries:
            assert entry.category == "법인세"
            assert entry.source == "국세청 안내서"
            assert entry.source_url is None
            assert entry.subcategory == "PDF 추출 (guide.pdf)"
            assert entry.is_active
            assert re.fullmatch(r"\d{4}-\d{2}", entry.last_updated)

    async def test_requires_category_and_source(self, session):
        pdf = IncomingFile(filename="guide.pdf", content_type="application/pdf", data=_text_pdf(self.LINES))

        with pytest.raises(BadRequestError) as exc_info:
            await KnowledgeService(session).ingest_pdf(pdf, "법인세", "")
        assert "카테고리와 출처" in exc_info.value.message

    async def test_rejects_other_file_types(self, session):
        doc = IncomingFile(filename="guide.txt", content_type="text/plain", data=b"text")

        with pytest.raises(BadRequestError) as exc_info:
            await KnowledgeService(session).ingest_pdf(doc, "법인세", "국세청")
        assert "PDF 파일만" in exc_info.value.message

    async def test_rejects_large_files(self, session):
        pdf = IncomingFile(filename="big.pdf", content_type="application/pdf", data=b"0" * (MAX_PDF_SIZE + 1))

        with pytest.raises(BadRequestError) as exc_info:
            await KnowledgeService(session).ingest_pdf(pdf, "법인세", "국세청")
        assert "10MB" in exc_info.value.message

    async def test_rejects_unreadable_pdf(self, session):
        pdf = IncomingFile(filename="broken.pdf", content_type="application/pdf", data=b"not a pdf")

        with pytest.raises(BadRequestError) as exc_info:
            await KnowledgeService(session).ingest_pdf(pdf, "법인세", "국세청")
        assert "PDF 파일을 읽는" in exc_info.value.message

    async def test_rejects_pdf_without_text(self, session):
        pdf = IncomingFile(filename="scan.pdf", content_type="application/pdf", data=_text_pdf(["Hi"]))

        with pytest.raises(BadRequestError) as exc_info:
            await KnowledgeService(session).ingest_pdf(pdf, "법인세", "국세청")
        assert "충분한 텍스트" in exc_info.value.message
        assert await KnowledgeService(session).list() == []
