"""
Telegram notifications for the operations team.

Notifications are best effort: a missing configuration or a failed call is
logged and reported as ``False``, never raised to the caller.
"""

from __future__ import annotations

import html
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx

from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.server.core.config import TelegramConfig, settings

logger = get_logger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
KST = timezone(timedelta(hours=9))


def _kst_now() -> str:
    return datetime.now(KST).strftime("%Y-%m-%d %H:%M:%S")


class TelegramNotifier:
    def __init__(self, config: Optional[TelegramConfig] = None, client: Optional[httpx.AsyncClient] = None) -> None:
        self.config = config or settings.telegram
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.config.bot_token and self.config.chat_id)

    async def send(self, text: str) -> bool:
        """Send an HTML-formatted message; returns whether Telegram accepted it."""
        if not self.enabled:
            logger.debug("Telegram is not configured, skipping notification")
            return False

        url = f"{TELEGRAM_API_URL}/bot{self.config.bot_token}/sendMessage"
        payload = {"chat_id": self.config.chat_id, "text": text, "parse_mode": "HTML"}
        client = self._client or httpx.AsyncClient(timeout=10.0)
        try:
            response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Telegram notification failed: {e}")
            return False
        finally:
            if self._client is None:
                await client.aclose()

        if response.status_code >= 400:
            logger.warning(f"Telegram notification rejected: {response.status_code} {response.text}")
            return False
        return True

    async def notify_customer_inquiry(
        self, user_name: str, user_email: str, title: str, content: str, inquiry_id: str
    ) -> bool:
        preview = content if len(content) <= 500 else content[:500] + "..."
        message = (
            "📩 <b>새 고객 문의</b>\n\n"
            f"👤 <b>사용자:</b> {html.escape(user_name)} ({html.escape(user_email)})\n"
            f"📌 <b>제목:</b> {html.escape(title)}\n"
            f"📝 <b>내용:</b>\n{html.escape(preview)}\n\n"
            f"🆔 <b>문의 ID:</b> <code>{inquiry_id}</code>\n"
            f"⏰ <b>접수 시간:</b> {_kst_now()}"
        )
        return await self.send(message)

    async def notify_visual_report_order(
        self, user_name: str, user_email: str, project_id: str, company_name: str, industry: Optional[str] = None
    ) -> bool:
        message = (
            "🔔 <b>비주얼 레포트 신청 알림</b>\n\n"
            f"👤 <b>사용자:</b> {html.escape(user_name)} ({html.escape(user_email)})\n"
            f"🏢 <b>회사명:</b> {html.escape(company_name)}\n"
            f"🏭 <b>업종:</b> {html.escape(industry or '미지정')}\n"
            f"📋 <b>프로젝트 ID:</b> <code>{project_id}</code>\n"
            f"⏰ <b>신청 시간:</b> {_kst_now()}\n\n"
            "👉 관리자 패널에서 확인하세요!"
        )
        return await self.send(message)


def get_notifier() -> TelegramNotifier:
    """FastAPI dependency providing the Telegram notifier."""
    return TelegramNotifier()
