"""
Authentication Endpoints.

Registration, login (bearer JWT) and the current user.
"""

from fastapi import APIRouter, Request, status
from pydantic import ValidationError

from corporate_advisor.core.errors import BadRequestError
from corporate_advisor.core.models.io.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from corporate_advisor.server.core.security import create_access_token
from corporate_advisor.server.services.deps import CurrentUserDep, SessionDep
from corporate_advisor.services.users import UserService

router = APIRouter()


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account with a free subscription and the signup credit bonus.",
    responses={409: {"description": "E-mail already registered"}},
)
async def register(data: RegisterRequest, session: SessionDep) -> UserRead:
    user = await UserService(session).register(data)
    return UserRead.model_validate(user)


async def _read_credentials(request: Request) -> LoginRequest:
    """Accept both an OAuth2 password form (``username``) and a JSON body (``email``)."""
    try:
        if request.headers.get("content-type", "").startswith("application/json"):
            payload = await request.json()
        else:
            form = await request.form()
            payload = {"email": form.get("username") or form.get("email"), "password": form.get("password")}
        return LoginRequest.model_validate(payload)
    except (ValueError, ValidationError) as e:
        raise BadRequestError("이메일과 비밀번호를 입력해주세요") from e


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Exchange e-mail and password for a bearer access token.",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(request: Request, session: SessionDep) -> TokenResponse:
    credentials = await _read_credentials(request)
    user = await UserService(session).authenticate(credentials.email, credentials.password)
    return TokenResponse(access_token=create_access_token(user.id, user.role))


@router.get(
    "/me",
    response_model=UserRead,
    summary="Current User",
    description="Return the authenticated user.",
    responses={401: {"description": "Not authenticated"}},
)
async def me(user: CurrentUserDep) -> UserRead:
    return UserRead.model_validate(user)
