from typing import List

from sqlalchemy import delete, select

from chirper.core.errors import NotFound
from chirper.db.models.follow import Follow as FollowModel
from chirper.db.models.user import User as UserModel
from chirper.db.repositories.base import BaseRepository
from chirper.db.repositories.user_repository import user_to_domain
from chirper.domains.follows.entities import Follow
from chirper.domains.identity.entities import User


class FollowRepository(BaseRepository):
    """Репозиторий подписок между пользователями"""

    conflict_message = "You already follow this user."

    async def create(self, follow: Follow) -> Follow:
        db_follow = FollowModel(follower_id=follow.follower_id, followed_id=follow.followed_id)

        self.session.add(db_follow)
        await self._commit()

        follow.id = db_follow.id
        follow.created_at = db_follow.created_at
        return follow

    async def get(self, follower_id: int, followed_id: int) -> Follow:
        """Поиск подписки по паре (follower, followed)"""
        result = await self._execute(
            select(FollowModel).where(
                FollowModel.follower_id == follower_id,
                FollowModel.followed_id == followed_id
            )
        )
        db_follow = result.scalar_one_or_none()
        if db_follow is None:
            raise NotFound("The follow does not exist.")
        return self._to_domain(db_follow)

    async def delete(self, follow: Follow) -> None:
        await self._execute(
            delete(FollowModel).where(
                FollowModel.follower_id == follow.follower_id,
                FollowModel.followed_id == follow.followed_id
            )
        )
        await self._commit()

    async def followers(self, user_id: int) -> List[User]:
        """Пользователи, подписанные на user_id"""
        result = await self._execute(
            select(UserModel)
            .join(FollowModel, FollowModel.follower_id == UserModel.id)
            .where(FollowModel.followed_id == user_id, UserModel.deleted_at.is_(None))
            .order_by(FollowModel.created_at.desc(), FollowModel.id.desc())
        )
        return [user_to_domain(db_user) for db_user in result.scalars().all()]

    async def following(self, user_id: int) -> List[User]:
        """Пользователи, на которых подписан user_id"""
        result = await self._execute(
            select(UserModel)
            .join(FollowModel, FollowModel.followed_id == UserModel.id)
            .where(FollowModel.follower_id == user_id, UserModel.deleted_at.is_(None))
            .order_by(FollowModel.created_at.desc(), FollowModel.id.desc())
        )
        return [user_to_domain(db_user) for db_user in result.scalars().all()]

    def _to_domain(self, db_follow: FollowModel) -> Follow:
        return Follow(
            id=db_follow.id,
            follower_id=db_follow.follower_id,
            followed_id=db_follow.followed_id,
            created_at=db_follow.created_at
        )
