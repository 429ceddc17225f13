import logging

from fastapi import APIRouter, Depends, Response, status

from chirper.api.deps import get_user_service
from chirper.core.auth import clear_remember_cookie, require_user, set_remember_cookie
from chirper.core.config import Settings, get_settings
from chirper.domains.identity.entities import User
from chirper.domains.identity.schemas import ProfileResponse, UserCreate, UserLogin
from chirper.domains.identity.services import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["authentication"])


@router.post("/register", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    response: Response,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings)
):
    """Регистрация нового пользователя и вход"""
    user = User(
        email=user_data.email,
        password=user_data.password,
        name=user_data.name,
        handle=user_data.handle,
        bio=user_data.bio
    )
    user = await users.register_user(user)

    set_remember_cookie(response, user.remember, settings)
    return user


@router.post("/login", response_model=ProfileResponse)
async def login(
    login_data: UserLogin,
    response: Response,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings)
):
    """Вход по email и паролю"""
    user = await users.authenticate(login_data.email, login_data.password)
    token, user = await users.issue_session(user)

    set_remember_cookie(response, token, settings)
    return user


@router.post("/logout")
async def logout(
    response: Response,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings)
):
    """Выход: токен меняется, cookie удаляется"""
    await users.rotate_session(current_user)

    clear_remember_cookie(response, settings)
    logger.info(f"Signed out user {current_user.id}")
    return {"message": "Successfully logged out"}


@router.get("/profile", response_model=ProfileResponse)
async def profile(current_user: User = Depends(require_user)):
    """Данные вошедшего пользователя"""
    return current_user
