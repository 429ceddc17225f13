from sqlalchemy import select, update

from chirper.core.errors import NotFound
from chirper.db.base import utcnow
from chirper.db.models.oauth import OAuth as OAuthModel
from chirper.db.repositories.base import BaseRepository
from chirper.domains.oauth.entities import OAuthLink

LINK_NOT_FOUND = "The OAuth link does not exist."


class OAuthRepository(BaseRepository):
    """Репозиторий привязок к OAuth-провайдерам"""

    conflict_message = "This account is already linked."

    async def create(self, link: OAuthLink) -> OAuthLink:
        db_link = OAuthModel(
            user_id=link.user_id,
            provider=link.provider,
            provider_user_id=link.provider_user_id,
            access_token=link.access_token,
            token_type=link.token_type,
            refresh_token=link.refresh_token,
            expiry=link.expiry
        )

        self.session.add(db_link)
        await self._commit()

        link.id = db_link.id
        link.created_at = db_link.created_at
        link.updated_at = db_link.updated_at
        return link

    async def update(self, link: OAuthLink) -> OAuthLink:
        """Обновление токенов существующей привязки"""
        link.updated_at = utcnow()
        result = await self._execute(
            update(OAuthModel)
            .where(OAuthModel.id == link.id)
            .values(
                access_token=link.access_token,
                token_type=link.token_type,
                refresh_token=link.refresh_token,
                expiry=link.expiry,
                updated_at=link.updated_at
            )
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFound(LINK_NOT_FOUND)
        await self._commit()
        return link

    async def get_by_provider_identity(self, provider: str, provider_user_id: str) -> OAuthLink:
        """Поиск привязки по паре (провайдер, id у провайдера)"""
        return await self._get_one(
            select(OAuthModel).where(
                OAuthModel.provider == provider,
                OAuthModel.provider_user_id == provider_user_id
            )
        )

    async def get_by_user(self, user_id: int) -> OAuthLink:
        """Любая привязка пользователя"""
        return await self._get_one(
            select(OAuthModel).where(OAuthModel.user_id == user_id).order_by(OAuthModel.id).limit(1)
        )

    async def _get_one(self, stmt) -> OAuthLink:
        result = await self._execute(stmt)
        db_link = result.scalar_one_or_none()
        if db_link is None:
            raise NotFound(LINK_NOT_FOUND)
        return self._to_domain(db_link)

    def _to_domain(self, db_link: OAuthModel) -> OAuthLink:
        """Преобразование модели БД в доменную сущность"""
        return OAuthLink(
            id=db_link.id,
            user_id=db_link.user_id,
            provider=db_link.provider,
            provider_user_id=db_link.provider_user_id,
            access_token=db_link.access_token,
            token_type=db_link.token_type,
            refresh_token=db_link.refresh_token,
            expiry=db_link.expiry,
            created_at=db_link.created_at,
            updated_at=db_link.updated_at
        )
