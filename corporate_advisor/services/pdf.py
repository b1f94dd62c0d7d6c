"""
PDF assembly with ReportLab.

Two documents are produced:

- the *visual report*: one 1024x576 page per generated slide image
- the *text report*: a 960x540 title page followed by the slide texts, used
  when no stored PDF exists for a project
"""

from __future__ import annotations

import base64
import io
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from reportlab.lib.colors import Color
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from corporate_advisor.ai.slides import Slide
from corporate_advisor.core.logging_config import get_logger

logger = get_logger(__name__)

VISUAL_PAGE_SIZE = (1024, 576)
TEXT_PAGE_SIZE = (960, 540)
MARGIN = 50
FOOTER_TEXT = "Generated by CorporateAI Advisor"

PRIMARY = Color(0.11, 0.25, 0.69)
BODY = Color(0.22, 0.25, 0.29)
MUTED = Color(0.3, 0.3, 0.3)

_EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"
    "\u2600-\u27BF"
    "\uFE00-\uFE0F"
    "\u200D"
    "]+"
)

FONT_CANDIDATES = {
    "NanumGothic": [
        "/usr/share/fonts/truetype/nanum/NanumGothic.ttf",
        "/usr/share/fonts/nanum/NanumGothic.ttf",
        "public/fonts/NanumGothic.ttf",
    ],
    "NanumGothicBold": [
        "/usr/share/fonts/truetype/nanum/NanumGothicBold.ttf",
        "/usr/share/fonts/nanum/NanumGothicBold.ttf",
        "public/fonts/NanumGothicBold.ttf",
    ],
}


def remove_emojis(text: str) -> str:
    return _EMOJI_RE.sub("", text).strip()


def _register_fonts() -> Tuple[str, str]:
    """Register a Korean-capable TTF when one is installed; fall back to Helvetica."""
    registered = set(pdfmetrics.getRegisteredFontNames())
    for name, paths in FONT_CANDIDATES.items():
        if name in registered:
            continue
        for path in paths:
            if not Path(path).exists():
                continue
            try:
                pdfmetrics.registerFont(TTFont(name, path))
                registered.add(name)
                break
            except Exception as e:
                logger.warning(f"Could not register font {path}: {e}")

    regular = "NanumGothic" if "NanumGothic" in registered else "Helvetica"
    if "NanumGothicBold" in registered:
        bold = "NanumGothicBold"
    elif regular != "Helvetica":
        bold = regular
    else:
        bold = "Helvetica-Bold"
    return regular, bold


def _fit_centered(image_size: Tuple[float, float], page_size: Tuple[float, float]) -> Tuple[float, float, float, float]:
    """Scale an image to fit the page keeping its aspect ratio; returns ``(x, y, width, height)``."""
    image_width, image_height = image_size
    page_width, page_height = page_size
    scale = min(page_width / image_width, page_height / image_height)
    width, height = image_width * scale, image_height * scale
    return (page_width - width) / 2, (page_height - height) / 2, width, height


def build_visual_pdf(images: Sequence[Optional[str]]) -> bytes:
    """Build the visual report from base64 slide images; ``None`` entries are skipped."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=VISUAL_PAGE_SIZE)
    pages = 0
    for index, image_b64 in enumerate(images, start=1):
        if not image_b64:
            continue
        try:
            reader = ImageReader(io.BytesIO(base64.b64decode(image_b64)))
            x, y, width, height = _fit_centered(reader.getSize(), VISUAL_PAGE_SIZE)
        except Exception as e:
            logger.warning(f"Skipping unreadable image of slide {index}: {e}")
            continue
        pdf.drawImage(reader, x, y, width=width, height=height)
        pdf.showPage()
        pages += 1
    pdf.save()
    logger.info(f"Visual PDF built with {pages} pages")
    return buffer.getvalue()


class TextReportWriter:
    """Lays out slide texts on 16:9 pages."""

    def __init__(self) -> None:
        self.font, self.bold_font = _register_fonts()
        self.width, self.height = TEXT_PAGE_SIZE
        self.buffer = io.BytesIO()
        self.pdf = canvas.Canvas(self.buffer, pagesize=TEXT_PAGE_SIZE)
        self.page_number = 0
        self.y = 0.0

    def _new_page(self) -> None:
        if self.page_number:
            self._footer()
            self.pdf.showPage()
        self.page_number += 1
        self.y = self.height - 80

    def _footer(self) -> None:
        self.pdf.setFont(self.font, 9)
        self.pdf.setFillColor(MUTED)
        self.pdf.drawString(MARGIN, 30, FOOTER_TEXT)
        self.pdf.drawRightString(self.width - MARGIN, 30, str(self.page_number))

    def _text(self, text: str, size: int, bold: bool = False, color: Color = BODY, indent: float = 0) -> None:
        font = self.bold_font if bold else self.font
        max_width = self.width - 2 * MARGIN - indent
        for line in simpleSplit(text, font, size, max_width) or [""]:
            if self.y < 80:
                self._new_page()
            self.pdf.setFont(font, size)
            self.pdf.setFillColor(color)
            self.pdf.drawString(MARGIN + indent, self.y, line)
            self.y -= size + 4

    def title_page(self, company_name: str, business_number: Optional[str], representative: str, date: datetime) -> None:
        self._new_page()
        self.y = self.height - 100
        self._text("Corporate AI Advisor", 24, bold=True, color=PRIMARY)
        self.y -= 16
        self._text("Business Analysis Report", 18, color=MUTED)
        self.y -= 40
        self._text(f"Company: {company_name}", 14, bold=True)
        self.y -= 10
        self._text(f"Business Number: {business_number or '-'}", 12)
        self.y -= 8
        self._text(f"Representative: {representative}", 12)
        self.y -= 8
        self._text(f"Analysis Date: {date.strftime('%Y-%m-%d')}", 12)

    def slide(self, slide: Slide) -> None:
        self._new_page()
        self._text(remove_emojis(f"{slide.slide_number}. {slide.title}"), 18, bold=True, color=PRIMARY)
        self.pdf.setStrokeColor(PRIMARY)
        self.pdf.setLineWidth(2)
        self.pdf.line(MARGIN, self.y + 13, self.width - MARGIN, self.y + 13)
        self.y -= 20

        for raw in slide.content.split("\n"):
            line = raw.strip()
            if not line:
                self.y -= 10
                continue
            if line.startswith("###"):
                self._text(remove_emojis(line.lstrip("#").replace("**", "")), 14, bold=True, color=PRIMARY)
                self.y -= 6
            elif line.startswith("##"):
                self._text(remove_emojis(line.lstrip("#").replace("**", "")), 16, bold=True, color=PRIMARY)
                self.y -= 8
            elif line.startswith("- ") or line.startswith("* "):
                self._text("• " + remove_emojis(line[2:].replace("**", "")), 11, indent=15)
            else:
                self._text(remove_emojis(line.replace("**", "")), 11)

    def finish(self) -> bytes:
        if self.page_number:
            self._footer()
        self.pdf.save()
        return self.buffer.getvalue()


def build_text_pdf(
    company_name: str,
    representative: str,
    slides: List[Slide],
    business_number: Optional[str] = None,
    date: Optional[datetime] = None,
) -> bytes:
    """Build the text report: title page plus one section per slide."""
    writer = TextReportWriter()
    writer.title_page(company_name, business_number, representative, date or datetime.now())
    for slide in slides:
        writer.slide(slide)
    data = writer.finish()
    logger.info(f"Text PDF built for {company_name}: {len(slides)} slides, {writer.page_number} pages")
    return data
