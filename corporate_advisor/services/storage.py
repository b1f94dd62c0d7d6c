"""
Blob storage backends.

Uploaded documents and generated PDFs are stored by path
(``{user_id}/{project_id}/...``). Supabase Storage is used when its URL and
service key are configured; otherwise files live under the local upload
directory.
"""

from __future__ import annotations

import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import httpx

from corporate_advisor.core.errors import StorageError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.server.core.config import StorageConfig, settings

logger = get_logger(__name__)


class StorageBackend(ABC):
    """Path-addressed blob storage."""

    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path`` and return its URL."""

    @abstractmethod
    async def download(self, path: str) -> bytes:
        """Read the object stored at ``path``."""

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """Delete a single object; returns whether it existed."""

    @abstractmethod
    async def delete_prefix(self, prefix: str) -> int:
        """Delete every object under ``prefix`` and return how many were removed."""

    @abstractmethod
    def url_for(self, path: str) -> str:
        """URL recorded in the database for ``path``."""

    @abstractmethod
    def path_from_url(self, url: str) -> str:
        """Inverse of ``url_for``."""


class LocalStorage(StorageBackend):
    """Stores objects below a local directory; URLs are ``uploads/<path>``-style relative paths."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root.resolve() not in target.parents and target != self.root.resolve():
            raise StorageError(f"Invalid storage path: {path}")
        return target

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug(f"Stored {len(data)} bytes at {target}")
        return self.url_for(path)

    async def download(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise StorageError(f"파일을 찾을 수 없습니다: {path}", status_code=404)
        return target.read_bytes()

    async def delete(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    async def delete_prefix(self, prefix: str) -> int:
        target = self._resolve(prefix)
        if not target.exists():
            return 0
        if target.is_file():
            target.unlink()
            return 1
        count = sum(1 for p in target.rglob("*") if p.is_file())
        shutil.rmtree(target)
        return count

    def url_for(self, path: str) -> str:
        return f"{self.root.name}/{path}"

    def path_from_url(self, url: str) -> str:
        prefix = f"{self.root.name}/"
        return url[len(prefix):] if url.startswith(prefix) else url


class SupabaseStorage(StorageBackend):
    """Supabase Storage over its REST API."""

    def __init__(self, url: str, service_key: str, bucket: str, client: Optional[httpx.AsyncClient] = None) -> None:
        self.base_url = url.rstrip("/")
        self.bucket = bucket
        self._headers = {"Authorization": f"Bearer {service_key}", "apikey": service_key}
        self._client = client

    def _http(self) -> httpx.AsyncClient:
        return self._client or httpx.AsyncClient(timeout=60.0)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {**self._headers, **kwargs.pop("headers", {})}
        client = self._http()
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
        finally:
            if self._client is None:
                await client.aclose()
        if response.status_code >= 400:
            logger.error(f"Supabase storage {method} {url} failed: {response.status_code} {response.text}")
            raise StorageError(
                f"파일 스토리지 요청 실패: {response.status_code}",
                status_code=404 if response.status_code == 404 else 500,
            )
        return response

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        await self._request(
            "POST",
            f"{self.base_url}/storage/v1/object/{self.bucket}/{path}",
            content=data,
            headers={"Content-Type": content_type, "x-upsert": "false"},
        )
        return self.url_for(path)

    async def download(self, path: str) -> bytes:
        response = await self._request("GET", f"{self.base_url}/storage/v1/object/{self.bucket}/{path}")
        return response.content

    async def _list(self, prefix: str) -> List[str]:
        response = await self._request(
            "POST",
            f"{self.base_url}/storage/v1/object/list/{self.bucket}",
            json={"prefix": prefix, "limit": 1000, "offset": 0},
        )
        return [f"{prefix.rstrip('/')}/{item['name']}" for item in response.json() if item.get("name")]

    async def delete(self, path: str) -> bool:
        await self._request(
            "DELETE",
            f"{self.base_url}/storage/v1/object/{self.bucket}",
            json={"prefixes": [path]},
        )
        return True

    async def delete_prefix(self, prefix: str) -> int:
        paths = await self._list(prefix)
        if not paths:
            return 0
        await self._request(
            "DELETE",
            f"{self.base_url}/storage/v1/object/{self.bucket}",
            json={"prefixes": paths},
        )
        return len(paths)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    def path_from_url(self, url: str) -> str:
        prefix = f"{self.base_url}/storage/v1/object/public/{self.bucket}/"
        return url[len(prefix):] if url.startswith(prefix) else url


def create_storage(config: Optional[StorageConfig] = None) -> StorageBackend:
    config = config or settings.storage
    if config.use_supabase:
        return SupabaseStorage(config.supabase_url, config.supabase_service_key, config.bucket)
    return LocalStorage(config.upload_dir)


def get_storage() -> StorageBackend:
    """FastAPI dependency providing the configured storage backend."""
    return create_storage()
