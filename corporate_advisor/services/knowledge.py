"""
Consulting chatbot knowledge base.

Administrators curate sourced question/answer entries, either one by one or
by uploading a PDF that is cut into section-sized chunks. The chatbot ranks
the active entries against each question with a keyword score and quotes the
best ones.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import fitz
from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database import utc_now
from corporate_advisor.core.database.entities import ChatbotKnowledge
from corporate_advisor.core.database.repositories import ChatbotKnowledgeRepository
from corporate_advisor.core.errors import BadRequestError, NotFoundError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.io.knowledge import KnowledgeCreate, KnowledgeUpdate, PdfIngestResult
from corporate_advisor.services.projects import IncomingFile

logger = get_logger(__name__)

MAX_PDF_SIZE = 10 * 1024 * 1024
CHUNK_MAX_LENGTH = 2000
MIN_PDF_TEXT_LENGTH = 50
MAX_KEYWORDS = 15
TITLE_MAX_LENGTH = 100

# A new section starts at a numbered or Hangul-lettered heading, a markdown heading or a rule
_SECTION_RE = re.compile(r"(?=\n\d+\.\s|\n[가-힣]+\.\s|\n#{1,3}\s|\n\*{3,}|\n-{3,})")
_HEADING_PREFIX_RE = re.compile(r"^(\d+\.|[가-힣]+\.|#{1,3})\s")
_HEADING_STRIP_RE = re.compile(r"^(\d+\.|[가-힣]+\.|#{1,3})\s*")
_FIGURE_RE = re.compile(r"\d+(?:\.\d+)?%|\d{1,3}(?:,\d{3})*원")

# fmt: off
IMPORTANT_TERMS = (
    "법인세", "소득세", "부가가치세", "세금", "세율", "공제", "감면",
    "가업승계", "상속", "증여", "퇴직금", "급여", "4대보험",
    "법인", "기업", "중소기업", "중견기업", "사업자",
    "신고", "납부", "기한", "세무조사", "가산세",
    "손금", "익금", "과세표준", "세액",
    "자본금", "주식", "배당", "이익잉여금",
    "대출", "이자", "부채", "자산", "감가상각",
    "원천징수", "간이과세", "일반과세",
    "연금", "건강보험", "고용보험", "산재보험",
)
# fmt: on


@dataclass
class TextChunk:
    title: str
    text: str


def extract_pdf_text(data: bytes) -> Tuple[str, int]:
    """Return the text of every page and the page count of a PDF.

    Raises:
        BadRequestError: when the bytes are not a readable PDF.
    """
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = "\n".join(page.get_text() for page in doc)
            return text, doc.page_count
    except Exception as e:
        logger.warning(f"PDF parse error: {e}")
        raise BadRequestError(
            "PDF 파일을 읽는 중 오류가 발생했습니다. 파일이 손상되었거나 암호화되어 있을 수 있습니다."
        ) from e


def split_text_into_chunks(text: str, max_length: int = CHUNK_MAX_LENGTH) -> List[TextChunk]:
    """Cut text into chunks of at most ``max_length`` characters.

    The text is first split at section headings. A section that fits is one
    chunk, titled by its first line when that line is a heading or short.
    Longer sections are packed paragraph by paragraph; a single paragraph
    longer than ``max_length`` stays whole.
    """
    clean = re.sub(r"\n{3,}", "\n\n", text.replace("\r\n", "\n")).strip()
    chunks: List[TextChunk] = []

    for section in _SECTION_RE.split(clean):
        section = section.strip()
        if not section:
            continue

        if len(section) <= max_length:
            first_line = section.split("\n", 1)[0].strip()
            is_heading = bool(_HEADING_PREFIX_RE.match(first_line)) or len(first_line) < TITLE_MAX_LENGTH
            title = _HEADING_STRIP_RE.sub("", first_line)[:TITLE_MAX_LENGTH] if is_heading else ""
            chunks.append(TextChunk(title=title, text=section))
            continue

        current, title = "", ""
        for paragraph in re.split(r"\n\n+", section):
            paragraph = paragraph.strip()
            if not paragraph:
                continue
            if not title and len(paragraph) < TITLE_MAX_LENGTH:
                title = paragraph
            if len(current + "\n\n" + paragraph) <= max_length:
                current = f"{current}\n\n{paragraph}" if current else paragraph
            else:
                if current:
                    chunks.append(TextChunk(title=title, text=current))
                current = paragraph
                title = paragraph if len(paragraph) < TITLE_MAX_LENGTH else ""
        if current:
            chunks.append(TextChunk(title=title, text=current))

    return chunks


def extract_keywords(text: str) -> List[str]:
    """Pick tax and business terms found in ``text``, at most ``MAX_KEYWORDS``."""
    found: List[str] = [term for term in IMPORTANT_TERMS if term in text]
    if _FIGURE_RE.search(text):
        found.extend(k for k in ("세율", "금액") if k not in found)
    if len(found) < 3:
        found.extend(k for k in ("법인컨설팅", "세무") if k not in found)
    return found[:MAX_KEYWORDS]


def score_entry(entry: ChatbotKnowledge, query: str) -> int:
    query_lower = query.lower()
    words = [w for w in query_lower.split() if len(w) > 1]
    score = 0

    if query_lower in entry.question.lower():
        score += 10
    for keyword in (k.lower() for k in entry.get_keywords_list()):
        if keyword in query_lower:
            score += 5
        score += 2 * sum(1 for w in words if w in keyword)
    if entry.category.lower() in query_lower:
        score += 3
    answer = entry.answer.lower()
    score += sum(1 for w in words if w in answer)
    return score


def search_knowledge(entries: Sequence[ChatbotKnowledge], query: str, limit: int = 5) -> List[ChatbotKnowledge]:
    """Entries relevant to ``query``, best first; entries scoring zero are dropped."""
    scored = [(score_entry(entry, query), entry) for entry in entries]
    ranked = sorted((item for item in scored if item[0] > 0), key=lambda item: item[0], reverse=True)
    return [entry for _, entry in ranked[:limit]]


class KnowledgeService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.entries = ChatbotKnowledgeRepository(session)

    async def list(self) -> List[ChatbotKnowledge]:
        return await self.entries.list_all()

    async def list_active(self) -> List[ChatbotKnowledge]:
        return await self.entries.list_active()

    async def get(self, entry_id: str) -> ChatbotKnowledge:
        entry = await self.entries.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError("지식 항목을 찾을 수 없습니다")
        return entry

    async def create(self, data: KnowledgeCreate) -> ChatbotKnowledge:
        entry = await self.entries.create(ChatbotKnowledge(**data.model_dump()))
        logger.info(f"Knowledge entry {entry.id} created in {entry.category}")
        return entry

    async def update(self, entry_id: str, data: KnowledgeUpdate) -> ChatbotKnowledge:
        entry = await self.get(entry_id)
        changes = data.model_dump(exclude_unset=True)
        # Blank optional fields are stored as missing
        for key in ("subcategory", "source_url"):
            if key in changes and not changes[key]:
                changes[key] = None
        for key, value in changes.items():
            setattr(entry, key, value)
        return await self.entries.update(entry)

    async def delete(self, entry_id: str) -> None:
        if not await self.entries.delete(entry_id):
            raise NotFoundError("지식 항목을 찾을 수 없습니다")

    async def ingest_pdf(
        self, file: IncomingFile, category: str, source: str, source_url: Optional[str] = None
    ) -> PdfIngestResult:
        """Turn a text PDF into knowledge entries, one per chunk."""
        if not category or not source:
            raise BadRequestError("카테고리와 출처는 필수입니다")
        if file.content_type != "application/pdf":
            raise BadRequestError("PDF 파일만 업로드할 수 있습니다")
        if len(file.data) > MAX_PDF_SIZE:
            raise BadRequestError(f"파일 크기는 {MAX_PDF_SIZE // (1024 * 1024)}MB 이하여야 합니다")

        text, pages = extract_pdf_text(file.data)
        if len(text.strip()) < MIN_PDF_TEXT_LENGTH:
            raise BadRequestError("PDF에서 충분한 텍스트를 추출할 수 없습니다. 이미지 기반 PDF는 지원하지 않습니다.")

        last_updated = utc_now().strftime("%Y-%m")
        chunks = split_text_into_chunks(text)
        for i, chunk in enumerate(chunks):
            self.session.add(
                ChatbotKnowledge(
                    category=category,
                    subcategory=f"PDF 추출 ({file.filename})",
                    question=chunk.title or f"{file.filename} - 섹션 {i + 1}",
                    answer=chunk.text,
                    source=source,
                    source_url=source_url or None,
                    keywords=", ".join(extract_keywords(chunk.text)),
                    last_updated=last_updated,
                )
            )
        await self.session.commit()

        logger.info(f"Ingested {file.filename}: {pages} pages into {len(chunks)} knowledge entries")
        return PdfIngestResult(
            message=f"PDF에서 {len(chunks)}개의 지식 항목이 생성되었습니다.",
            entries_count=len(chunks),
            total_pages=pages,
            total_characters=len(text),
        )
