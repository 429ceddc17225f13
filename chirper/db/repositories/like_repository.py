from typing import List

from sqlalchemy import delete, select

from chirper.core.errors import NotFound
from chirper.db.models.like import Like as LikeModel
from chirper.db.repositories.base import BaseRepository
from chirper.domains.likes.entities import Like


class LikeRepository(BaseRepository):
    """Репозиторий лайков"""

    conflict_message = "You already like that tweet."

    async def create(self, like: Like) -> Like:
        db_like = LikeModel(user_id=like.user_id, tweet_id=like.tweet_id)

        self.session.add(db_like)
        await self._commit()

        like.id = db_like.id
        like.created_at = db_like.created_at
        return like

    async def get(self, user_id: int, tweet_id: int) -> Like:
        result = await self._execute(
            select(LikeModel).where(LikeModel.user_id == user_id, LikeModel.tweet_id == tweet_id)
        )
        db_like = result.scalar_one_or_none()
        if db_like is None:
            raise NotFound("The like does not exist.")
        return self._to_domain(db_like)

    async def delete(self, like: Like) -> None:
        """Лайки удаляются физически"""
        await self._execute(
            delete(LikeModel).where(
                LikeModel.user_id == like.user_id,
                LikeModel.tweet_id == like.tweet_id
            )
        )
        await self._commit()

    async def by_user(self, user_id: int) -> List[Like]:
        result = await self._execute(
            select(LikeModel)
            .where(LikeModel.user_id == user_id)
            .order_by(LikeModel.created_at.desc(), LikeModel.id.desc())
        )
        return [self._to_domain(db_like) for db_like in result.scalars().all()]

    def _to_domain(self, db_like: LikeModel) -> Like:
        return Like(
            id=db_like.id,
            user_id=db_like.user_id,
            tweet_id=db_like.tweet_id,
            created_at=db_like.created_at
        )
