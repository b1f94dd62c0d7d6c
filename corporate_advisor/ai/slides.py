"""
Slide JSON parsing.

Models return the presentation as JSON, but often wrapped in a markdown fence,
surrounded by prose, or with backslashes that are not valid JSON escapes (for
example LaTeX-like ``\(`` sequences). ``parse_slides`` repairs those cases on a
best-effort basis and normalizes every slide to the same shape.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List

from pydantic import BaseModel, Field

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
# a backslash that does not start a valid JSON escape sequence
_INVALID_ESCAPE_RE = re.compile(r'\\(?!["\\/bfnrtu])')


class SlideParseError(ValueError):
    """The model output does not contain a usable slides object."""


class Slide(BaseModel):
    slide_number: int
    title: str = ""
    content: str = ""
    speaker_notes: str = ""
    chart_type: str = Field(default="none")


def extract_json_text(text: str) -> str:
    """Return the JSON candidate inside ``text``: a fenced block, else the outermost ``{...}`` span."""
    fenced = _FENCE_RE.search(text)
    if fenced:
        return fenced.group(1).strip()
    match = _OBJECT_RE.search(text)
    if match:
        return match.group(0)
    return text.strip()


def fix_invalid_escapes(text: str) -> str:
    return _INVALID_ESCAPE_RE.sub(r"\\\\", text)


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass
    try:
        return json.loads(fix_invalid_escapes(candidate))
    except json.JSONDecodeError as exc:
        raise SlideParseError(f"Invalid slide JSON: {exc}") from exc


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return "\n".join(f"- {item}" if not str(item).startswith(("-", "*")) else str(item) for item in value)
    return str(value)


def parse_slides(text: str) -> List[Slide]:
    """Parse model output into a list of slides.

    Raises:
        SlideParseError: when no ``slides`` array can be recovered.
    """
    if not text or not text.strip():
        raise SlideParseError("Empty model output")

    data = _loads(extract_json_text(text))
    raw_slides = data.get("slides") if isinstance(data, dict) else data
    if not isinstance(raw_slides, list) or not raw_slides:
        raise SlideParseError("No slides found in model output")

    slides: List[Slide] = []
    for index, raw in enumerate(raw_slides, start=1):
        if not isinstance(raw, dict):
            continue
        number = raw.get("slideNumber", raw.get("slide_number", index))
        try:
            number = int(number)
        except (TypeError, ValueError):
            number = index
        slides.append(
            Slide(
                slide_number=number,
                title=_as_text(raw.get("title")),
                content=_as_text(raw.get("content")),
                speaker_notes=_as_text(raw.get("speaker_notes") or raw.get("speakerNotes")),
                chart_type="none",
            )
        )
    if not slides:
        raise SlideParseError("No slides found in model output")
    return slides


def slides_to_dicts(slides: List[Slide]) -> List[Dict[str, Any]]:
    return [slide.model_dump() for slide in slides]
