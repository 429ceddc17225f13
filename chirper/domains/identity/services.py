import logging
import re
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from chirper.core.errors import Internal, InvalidCredentials, InvalidInput, NotFound
from chirper.core.security import (
    BCRYPT_MAX_BYTES,
    REMEMBER_TOKEN_BYTES,
    decoded_byte_length,
    generate_token,
    hash_password,
    keyed_hash,
    peppered_length,
    verify_password,
)
from chirper.core.validation import run_guards
from chirper.db.repositories.oauth_repository import OAuthRepository
from chirper.db.repositories.user_repository import UserRepository
from chirper.domains.identity.entities import User
from chirper.domains.images.entities import OWNER_TYPE_USER, Image
from chirper.domains.images.services import ImageService

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,16}$")

PASSWORD_MIN_LENGTH = 8
NAME_MAX_LENGTH = 15
HANDLE_MAX_LENGTH = 15
BIO_MAX_LENGTH = 160

USER_IMAGE_TYPES = ("avatar", "header")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Сервис пользователей: регистрация, вход, remember-сессии и профиль"""

    def __init__(self, session: AsyncSession, pepper: str, hmac_key: str, images: ImageService):
        self.session = session
        self.pepper = pepper
        self.hmac_key = hmac_key
        self.images = images
        self.user_repository = UserRepository(session)
        self.oauth_repository = OAuthRepository(session)

    async def register_user(self, user: User, commit: bool = True) -> User:
        """Регистрация нового пользователя; при успехе user.remember содержит токен для cookie.

        С commit=False строка только отправляется в базу, а фиксирует транзакцию вызывающий.
        """
        await run_guards(
            user,
            self.password_required,
            self.password_min_length,
            self.password_max_bytes,
            self.password_bcrypt,
            self.password_hash_required,
            self.remember_set_if_unset,
            self.remember_min_bytes,
            self.remember_hmac,
            self.remember_hash_required,
            self.email_normalize,
            self.email_required,
            self.email_format,
            self.email_is_available,
            self.name_valid,
            self.handle_valid,
            self.bio_valid
        )

        user = await self.user_repository.create(user, commit=commit)
        logger.info(f"Registered user {user.id}")
        return user

    async def update_user(self, user: User) -> User:
        """Сохранение изменений пользователя через проверки обновления"""
        await run_guards(
            user,
            self.password_hash_or_oauth_required,
            self.password_min_length,
            self.password_max_bytes,
            self.password_bcrypt,
            self.password_hash_required,
            self.remember_min_bytes,
            self.remember_hmac,
            self.remember_hash_required,
            self.email_normalize,
            self.email_required,
            self.email_format,
            self.email_is_available,
            self.name_valid,
            self.handle_valid,
            self.bio_valid
        )

        return await self.user_repository.update(user)

    async def authenticate(self, email: str, password: str) -> User:
        """Проверка email и пароля"""
        try:
            user = await self.user_repository.get_by_email(normalize_email(email))
        except NotFound:
            raise InvalidCredentials("The email address does not exist in our database.")

        # У аккаунтов, созданных через OAuth, пароля нет
        if not user.password_hash:
            raise InvalidCredentials("The password is incorrect.")

        if not await run_in_threadpool(verify_password, user.password_hash, password, self.pepper):
            raise InvalidCredentials("The password is incorrect.")
        return user

    async def resolve_session(self, token: Optional[str]) -> Optional[User]:
        """Пользователь по значению remember-cookie; None означает анонимный запрос"""
        if not token:
            return None
        try:
            if decoded_byte_length(token) < REMEMBER_TOKEN_BYTES:
                return None
        except InvalidInput:
            return None

        try:
            user = await self.user_repository.get_by_remember_hash(keyed_hash(self.hmac_key, token))
        except NotFound:
            return None
        user.remember = token
        return user

    async def issue_session(self, user: User) -> Tuple[str, User]:
        """Токен для cookie; существующий токен пользователя переиспользуется"""
        if user.remember:
            return user.remember, user

        user.remember = generate_token()
        user = await self.update_user(user)
        logger.info(f"Signed in user {user.id}")
        return user.remember, user

    async def rotate_session(self, user: User) -> str:
        """Замена remember-токена; старая cookie перестает работать"""
        user.remember = generate_token()
        await self.update_user(user)
        logger.info(f"Rotated session of user {user.id}")
        return user.remember

    async def get_user(self, user_id: int) -> User:
        return await self.user_repository.get_by_id(user_id)

    async def update_profile(
        self,
        user: User,
        name: Optional[str] = None,
        handle: Optional[str] = None,
        bio: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None
    ) -> User:
        """Изменение полей профиля; None оставляет поле как есть"""
        if name is not None:
            user.name = name
        if handle is not None:
            user.handle = handle
        if bio is not None:
            user.bio = bio
        if email is not None:
            user.email = email
        if password:
            user.password = password
        return await self.update_user(user)

    async def delete_user(self, user: User) -> User:
        """Мягкое удаление аккаунта; живые cookie перестают резолвиться"""
        user.remember = generate_token()
        user.remember_hash = keyed_hash(self.hmac_key, user.remember)
        user = await self.user_repository.soft_delete(user)
        await self.images.delete_all(OWNER_TYPE_USER, user.id)
        logger.info(f"Deleted user {user.id}")
        return user

    async def replace_image(self, user: User, image_type: str, content: bytes, filename: str) -> User:
        """Загрузка нового аватара или шапки; прежние файлы пользователя удаляются"""
        self._check_image_type(image_type)
        img = await self.images.upload_image(OWNER_TYPE_USER, user.id, content, filename)
        setattr(user, image_type, img.filename)
        user = await self.update_user(user)

        for stored in await self.images.by_owner(OWNER_TYPE_USER, user.id):
            if stored.filename not in (user.avatar, user.header):
                await self.images.delete(stored)
        return user

    async def remove_image(self, user: User, image_type: str) -> User:
        self._check_image_type(image_type)
        filename = getattr(user, image_type)
        if not filename:
            raise NotFound("The image does not exist.")

        await self.images.delete(Image(owner_type=OWNER_TYPE_USER, owner_id=user.id, filename=filename))
        setattr(user, image_type, "")
        return await self.update_user(user)

    @staticmethod
    def _check_image_type(image_type: str) -> None:
        if image_type not in USER_IMAGE_TYPES:
            raise InvalidInput("Invalid image type, must be 'avatar' or 'header'.")

    # Проверки пароля

    def password_required(self, user: User) -> None:
        if user.no_password_needed:
            return
        if not user.password:
            raise InvalidInput("A password is required.")

    async def password_hash_or_oauth_required(self, user: User) -> None:
        if user.password or user.password_hash:
            return
        try:
            await self.oauth_repository.get_by_user(user.id)
        except NotFound:
            raise InvalidInput("A password is required.")
        user.no_password_needed = True

    def password_min_length(self, user: User) -> None:
        if not user.password:
            return
        if len(user.password) < PASSWORD_MIN_LENGTH:
            raise InvalidInput(f"The password must have at least {PASSWORD_MIN_LENGTH} characters.")

    def password_max_bytes(self, user: User) -> None:
        if not user.password:
            return
        if peppered_length(user.password, self.pepper) > BCRYPT_MAX_BYTES:
            limit = BCRYPT_MAX_BYTES - len(self.pepper.encode())
            raise InvalidInput(f"The password must not be longer than {limit} bytes.")

    async def password_bcrypt(self, user: User) -> None:
        if not user.password:
            return
        user.password_hash = await run_in_threadpool(hash_password, user.password, self.pepper)
        user.password = ""

    def password_hash_required(self, user: User) -> None:
        if user.no_password_needed:
            return
        if not user.password_hash:
            raise InvalidInput("A password is required.")

    # Проверки remember-токена

    def remember_set_if_unset(self, user: User) -> None:
        if user.remember:
            return
        user.remember = generate_token()

    def remember_min_bytes(self, user: User) -> None:
        if not user.remember:
            return
        if decoded_byte_length(user.remember) < REMEMBER_TOKEN_BYTES:
            raise InvalidInput(f"The remember token must be at least {REMEMBER_TOKEN_BYTES} bytes.")

    def remember_hmac(self, user: User) -> None:
        if not user.remember:
            return
        user.remember_hash = keyed_hash(self.hmac_key, user.remember)

    def remember_hash_required(self, user: User) -> None:
        if not user.remember_hash:
            raise Internal(f"user {user.id} has no remember token hash")

    # Проверки email

    def email_normalize(self, user: User) -> None:
        user.email = normalize_email(user.email)

    def email_required(self, user: User) -> None:
        if not user.email:
            raise InvalidInput("An email address is required.")

    def email_format(self, user: User) -> None:
        if not EMAIL_PATTERN.match(user.email):
            raise InvalidInput("The email address is invalid.")

    async def email_is_available(self, user: User) -> None:
        # Удаленные аккаунты тоже занимают адрес
        try:
            existing = await self.user_repository.get_by_email(user.email, include_deleted=True)
        except NotFound:
            return
        if existing.id != user.id:
            raise InvalidInput("This email address is already taken.")

    # Проверки профиля

    def name_valid(self, user: User) -> None:
        user.name = user.name.strip()
        if not user.name:
            raise InvalidInput("A name is required.")
        if len(user.name) > NAME_MAX_LENGTH:
            raise InvalidInput(f"The name must not be longer than {NAME_MAX_LENGTH} characters.")

    def handle_valid(self, user: User) -> None:
        user.handle = user.handle.strip().removeprefix("@").lower()
        if not user.handle:
            raise InvalidInput("A handle is required.")
        if len(user.handle) > HANDLE_MAX_LENGTH:
            raise InvalidInput(f"The handle must not be longer than {HANDLE_MAX_LENGTH} characters.")

    def bio_valid(self, user: User) -> None:
        if len(user.bio) > BIO_MAX_LENGTH:
            raise InvalidInput(f"The bio must not be longer than {BIO_MAX_LENGTH} characters.")
