from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status

from chirper.api.deps import get_user_service
from chirper.core.config import Settings, get_settings
from chirper.domains.identity.entities import User
from chirper.domains.identity.services import UserService

# Срок жизни remember-cookie
REMEMBER_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


async def resolve_user(
    request: Request,
    settings: Settings = Depends(get_settings),
    users: UserService = Depends(get_user_service)
) -> Optional[User]:
    """Первая стадия: пользователь по remember-cookie или None для анонимного запроса"""
    token = request.cookies.get(settings.remember_cookie_name)
    return await users.resolve_session(token)


async def require_user(user: Optional[User] = Depends(resolve_user)) -> User:
    """Вторая стадия: запрос без пользователя дальше не проходит"""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be signed in to do that.",
        )
    return user


def set_remember_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.remember_cookie_name,
        value=token,
        max_age=REMEMBER_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.is_prod,
    )


def clear_remember_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.remember_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.is_prod,
    )
