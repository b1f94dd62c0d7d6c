"""
Gemini client wrapper.

This module wraps the ``google-genai`` SDK with the operations the analysis
pipeline needs:

- automatic text-model selection (flash models first, newest version first),
  cached for the lifetime of the process
- uploading project documents to the Files API and waiting for processing
- plain and Google-Search-grounded text generation
- multi-turn chat for the consulting chatbot
- slide image generation with a retry/fallback loop over a static model list

Every call is timed and reported through ``log_ai_call``.
"""

from __future__ import annotations

import asyncio
import base64
import io
import re
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from google import genai
from google.genai import errors, types

from corporate_advisor.core.errors import AIServiceError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.monitoring import log_ai_call
from corporate_advisor.server.core.config import GeminiConfig, settings

logger = get_logger(__name__)

_VERSION_RE = re.compile(r"\d+\.\d+")

# Selected text model, shared by every client instance until restart
_cached_model_name: Optional[str] = None


def reset_model_cache() -> None:
    global _cached_model_name
    _cached_model_name = None


def rank_models(model_names: Sequence[str]) -> List[str]:
    """Sort Gemini model names: flash models first, then by descending ``major.minor`` version."""

    def key(name: str):
        short = name.replace("models/", "")
        version = _VERSION_RE.search(short)
        return (0 if "flash" in short else 1, -float(version.group(0)) if version else 0.0)

    return sorted((name.replace("models/", "") for name in model_names), key=key)


def is_overloaded(exc: Exception) -> bool:
    """True when the error means the model is temporarily unavailable (HTTP 503 / overloaded)."""
    code = getattr(exc, "code", None)
    if code == 503:
        return True
    message = str(exc).lower()
    return "overloaded" in message or "unavailable" in message or "503" in message


@dataclass
class UploadedFile:
    """A document uploaded to the Gemini Files API."""

    name: str
    uri: str
    mime_type: str
    display_name: str

    def as_part(self) -> types.Part:
        return types.Part.from_uri(file_uri=self.uri, mime_type=self.mime_type)


class GeminiClient:
    """Async facade over ``genai.Client`` used by the analysis pipeline."""

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        client: Optional[genai.Client] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or settings.gemini
        if client is None:
            if not self.config.api_key:
                raise AIServiceError("Gemini API 키가 설정되지 않았습니다")
            client = genai.Client(api_key=self.config.api_key)
        self._client = client
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Model selection
    # ------------------------------------------------------------------

    async def select_model(self) -> str:
        """Pick the best available text model, falling back to the configured default."""
        global _cached_model_name
        if _cached_model_name:
            return _cached_model_name

        try:
            candidates = []
            pager = await self._client.aio.models.list()
            async for model in pager:
                name = model.name or ""
                actions = model.supported_actions or []
                if "generateContent" in actions and "gemini" in name:
                    candidates.append(name)
            if not candidates:
                raise AIServiceError("No compatible Gemini models found")
            _cached_model_name = rank_models(candidates)[0]
            logger.info(f"Selected Gemini model: {_cached_model_name}")
        except Exception as e:
            logger.warning(f"Gemini model listing failed, using {self.config.default_model}: {e}")
            _cached_model_name = self.config.default_model
        return _cached_model_name

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def upload_file(self, data: bytes, mime_type: str, display_name: str) -> UploadedFile:
        """Upload a document and wait until Gemini has finished processing it."""
        file = await self._client.aio.files.upload(
            file=io.BytesIO(data),
            config=types.UploadFileConfig(mime_type=mime_type, display_name=display_name),
        )
        while file.state == types.FileState.PROCESSING:
            await self._sleep(self.config.file_poll_interval_seconds)
            file = await self._client.aio.files.get(name=file.name)
        if file.state == types.FileState.FAILED:
            raise AIServiceError(f"File processing failed on Gemini: {display_name}")
        return UploadedFile(
            name=file.name,
            uri=file.uri,
            mime_type=file.mime_type or mime_type,
            display_name=display_name,
        )

    # ------------------------------------------------------------------
    # Text generation
    # ------------------------------------------------------------------

    async def generate_text(
        self,
        prompt: str,
        files: Sequence[UploadedFile] = (),
        *,
        grounded: bool = False,
        json_output: bool = False,
        operation: str = "text",
    ) -> str:
        """Generate text from a prompt and optional uploaded documents.

        Args:
            prompt: Rendered prompt text
            files: Documents to attach before the prompt
            grounded: Enable Google Search grounding
            json_output: Ask for an ``application/json`` response
            operation: Name reported to monitoring
        """
        model = await self.select_model()
        contents: list = [f.as_part() for f in files]
        contents.append(prompt)

        config_kwargs = {}
        if grounded:
            config_kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        if json_output:
            config_kwargs["response_mime_type"] = "application/json"
        config = types.GenerateContentConfig(**config_kwargs) if config_kwargs else None

        start = time.time()
        try:
            response = await self._client.aio.models.generate_content(model=model, contents=contents, config=config)
        except Exception:
            log_ai_call(operation, model, (time.time() - start) * 1000, success=False)
            raise
        log_ai_call(operation, model, (time.time() - start) * 1000)

        text = response.text or ""
        if not text.strip():
            raise AIServiceError(f"Gemini returned an empty response for {operation}")
        return text

    async def chat(self, message: str, history: Sequence[Tuple[str, str]] = (), operation: str = "chat") -> str:
        """Answer ``message`` in the context of earlier ``(role, text)`` turns.

        Roles other than ``user`` are sent as ``model`` turns.
        """
        model = await self.select_model()
        contents = [
            types.Content(role="user" if role == "user" else "model", parts=[types.Part.from_text(text=text)])
            for role, text in history
        ]
        contents.append(types.Content(role="user", parts=[types.Part.from_text(text=message)]))
        config = types.GenerateContentConfig(
            temperature=self.config.chat_temperature,
            max_output_tokens=self.config.chat_max_output_tokens,
        )

        start = time.time()
        try:
            response = await self._client.aio.models.generate_content(model=model, contents=contents, config=config)
        except Exception:
            log_ai_call(operation, model, (time.time() - start) * 1000, success=False)
            raise
        log_ai_call(operation, model, (time.time() - start) * 1000)

        text = response.text or ""
        if not text.strip():
            raise AIServiceError(f"Gemini returned an empty response for {operation}")
        return text

    # ------------------------------------------------------------------
    # Image generation
    # ------------------------------------------------------------------

    async def generate_image(self, prompt: str) -> Optional[str]:
        """Generate one image and return it as base64, or ``None`` when every model failed.

        Each model of the configured list gets ``image_max_retries`` attempts.
        Overload errors are retried after ``image_backoff_seconds * 2**attempt``
        seconds; any other error, or an exhausted retry budget, moves on to the
        next model.
        """
        for model in self.config.image_models:
            for attempt in range(self.config.image_max_retries):
                start = time.time()
                try:
                    response = await self._client.aio.models.generate_content(
                        model=model,
                        contents=prompt,
                        config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
                    )
                except errors.APIError as e:
                    log_ai_call("image", model, (time.time() - start) * 1000, success=False)
                    if is_overloaded(e) and attempt < self.config.image_max_retries - 1:
                        delay = self.config.image_backoff_seconds * (2**attempt)
                        logger.warning(f"Image model {model} overloaded, retrying in {delay:.1f}s")
                        await self._sleep(delay)
                        continue
                    logger.warning(f"Image model {model} failed: {e}")
                    break

                log_ai_call("image", model, (time.time() - start) * 1000)
                image = self._extract_image(response)
                if image is not None:
                    return image
                logger.warning(f"Image model {model} returned no image data")
                break

        logger.error("All image models failed")
        return None

    @staticmethod
    def _extract_image(response: types.GenerateContentResponse) -> Optional[str]:
        for candidate in response.candidates or []:
            if candidate.content is None:
                continue
            for part in candidate.content.parts or []:
                if part.inline_data is not None and part.inline_data.data:
                    data = part.inline_data.data
                    if isinstance(data, bytes):
                        return base64.b64encode(data).decode("ascii")
                    return data
        return None


def get_gemini_client() -> GeminiClient:
    """FastAPI dependency providing a Gemini client built from settings."""
    return GeminiClient()
