import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from chirper.core.errors import InvalidCredentials, InvalidInput, NotFound
from chirper.core.validation import run_guards
from chirper.db.repositories.oauth_repository import OAuthRepository
from chirper.domains.identity.entities import User
from chirper.domains.identity.services import HANDLE_MAX_LENGTH, NAME_MAX_LENGTH, UserService, normalize_email
from chirper.domains.oauth.entities import OAuthLink, ProviderIdentity

logger = logging.getLogger(__name__)

SIGN_IN_FAILED = "Failed to sign you in with that method. Please try a different one."


class OAuthService:
    """Сервис привязок пользователей к OAuth-провайдерам"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.oauth_repository = OAuthRepository(session)

    async def create_link(self, link: OAuthLink) -> OAuthLink:
        await run_guards(
            link,
            self.user_id_required,
            self.provider_required,
            self.provider_user_id_required
        )
        return await self.oauth_repository.create(link)

    async def update_link(self, link: OAuthLink) -> OAuthLink:
        """Обновление токенов существующей привязки"""
        await run_guards(
            link,
            self.id_valid,
            self.user_id_required,
            self.provider_required,
            self.provider_user_id_required
        )
        return await self.oauth_repository.update(link)

    async def find_by_identity(self, provider: str, provider_user_id: str) -> OAuthLink:
        return await self.oauth_repository.get_by_provider_identity(provider, provider_user_id)

    def id_valid(self, link: OAuthLink) -> None:
        if not link.id or link.id <= 0:
            raise InvalidInput("OAuth ID is invalid.")

    def user_id_required(self, link: OAuthLink) -> None:
        if not link.user_id or link.user_id <= 0:
            raise InvalidInput("A user ID is required.")

    def provider_required(self, link: OAuthLink) -> None:
        if not link.provider:
            raise InvalidInput("An OAuth provider is required.")

    def provider_user_id_required(self, link: OAuthLink) -> None:
        if not link.provider_user_id:
            raise InvalidInput("A provider user ID is required.")


class OAuthSignIn:
    """Вход через провайдера: находит или создает пользователя и привязку, затем выдает сессию"""

    def __init__(self, users: UserService, oauth: OAuthService):
        self.users = users
        self.oauth = oauth

    async def sign_in(self, identity: ProviderIdentity) -> Tuple[str, User]:
        """Возвращает remember-токен для cookie и вошедшего пользователя"""
        user = await self._resolve_user(identity)
        if user is None:
            raise InvalidCredentials(SIGN_IN_FAILED)

        token, user = await self.users.issue_session(user)
        return token, user

    async def _resolve_user(self, identity: ProviderIdentity):
        # 1. Пользователь уже входил через этого провайдера
        try:
            link = await self.oauth.find_by_identity(identity.provider, identity.provider_user_id)
        except NotFound:
            link = None

        if link is not None:
            link.refresh_tokens(identity)
            await self.oauth.update_link(link)
            try:
                return await self.users.get_user(link.user_id)
            except NotFound:
                return None

        # 2. Есть локальный аккаунт с тем же email
        if identity.email:
            try:
                user = await self.users.user_repository.get_by_email(normalize_email(identity.email))
            except NotFound:
                user = None
            if user is not None:
                await self.oauth.create_link(identity.to_link(user.id))
                logger.info(f"Linked {identity.provider} account to user {user.id}")
                return user

        # 3. Новый аккаунт без пароля; пользователь и привязка фиксируются одной транзакцией
        user = User(
            email=identity.email or "",
            name=identity.name[:NAME_MAX_LENGTH],
            handle=identity.handle[:HANDLE_MAX_LENGTH],
            no_password_needed=True
        )
        user = await self.users.register_user(user, commit=False)
        await self.oauth.create_link(identity.to_link(user.id))
        logger.info(f"Registered user {user.id} via {identity.provider}")
        return user
