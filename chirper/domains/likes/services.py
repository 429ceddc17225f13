import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from chirper.core.errors import InvalidInput, NotFound
from chirper.core.validation import run_guards
from chirper.db.repositories.like_repository import LikeRepository
from chirper.db.repositories.tweet_repository import TweetRepository
from chirper.domains.likes.entities import Like

logger = logging.getLogger(__name__)


class LikeService:
    """Сервис лайков"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.like_repository = LikeRepository(session)
        self.tweet_repository = TweetRepository(session)

    async def create_like(self, like: Like) -> Like:
        await run_guards(like, self.tweet_exists, self.not_already_liked)

        like = await self.like_repository.create(like)
        logger.info(f"User {like.user_id} liked tweet {like.tweet_id}")
        return like

    async def delete_like(self, like: Like) -> None:
        await run_guards(like, self.like_exists)

        await self.like_repository.delete(like)
        logger.info(f"User {like.user_id} unliked tweet {like.tweet_id}")

    async def likes_of(self, user_id: int) -> List[Like]:
        return await self.like_repository.by_user(user_id)

    async def user_likes(self, user_id: int, tweet_id: int) -> bool:
        try:
            await self.like_repository.get(user_id, tweet_id)
        except NotFound:
            return False
        return True

    async def tweet_exists(self, like: Like) -> None:
        try:
            await self.tweet_repository.get_by_id(like.tweet_id)
        except NotFound:
            raise NotFound("The liked tweet does not exist.")

    async def not_already_liked(self, like: Like) -> None:
        if await self.user_likes(like.user_id, like.tweet_id):
            raise InvalidInput("You already like that tweet.")

    async def like_exists(self, like: Like) -> None:
        try:
            stored = await self.like_repository.get(like.user_id, like.tweet_id)
        except NotFound:
            raise NotFound("You cannot unlike a tweet you have not liked.")
        like.id = stored.id
        like.created_at = stored.created_at
