"""Gemini integration: client wrapper and slide JSON parsing."""

from .gemini import GeminiClient, UploadedFile, get_gemini_client
from .slides import Slide, SlideParseError, parse_slides

__all__ = ["GeminiClient", "Slide", "SlideParseError", "UploadedFile", "get_gemini_client", "parse_slides"]
