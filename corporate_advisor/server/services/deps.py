"""
Request dependencies.

Provides the database session, the authenticated user (bearer JWT), the
admin guard and the external-service clients to API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.ai.gemini import GeminiClient, get_gemini_client
from corporate_advisor.core.database import get_session
from corporate_advisor.core.database.entities import User
from corporate_advisor.core.database.repositories import UserRepository
from corporate_advisor.core.errors import AuthenticationError, PermissionDeniedError
from corporate_advisor.server.core import constant
from corporate_advisor.server.core.security import decode_access_token
from corporate_advisor.services.notifications import TelegramNotifier, get_notifier
from corporate_advisor.services.storage import StorageBackend, get_storage

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{constant.API_V1_STR}/auth/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user(
    session: SessionDep,
    token: Annotated[Optional[str], Depends(oauth2_scheme)] = None,
) -> User:
    """Resolve the user of the bearer token."""
    if not token:
        raise AuthenticationError()
    payload = decode_access_token(token)
    if not payload or not payload.get("sub"):
        raise AuthenticationError()
    user = await UserRepository(session).get_by_id(payload["sub"])
    if user is None:
        raise AuthenticationError()
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


async def get_admin_user(user: CurrentUserDep) -> User:
    if not user.is_admin:
        raise PermissionDeniedError()
    return user


AdminUserDep = Annotated[User, Depends(get_admin_user)]
GeminiDep = Annotated[GeminiClient, Depends(get_gemini_client)]
StorageDep = Annotated[StorageBackend, Depends(get_storage)]
NotifierDep = Annotated[TelegramNotifier, Depends(get_notifier)]
