import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from chirper.core.errors import InvalidInput, NotFound
from chirper.core.validation import run_guards
from chirper.db.repositories.follow_repository import FollowRepository
from chirper.db.repositories.user_repository import UserRepository
from chirper.domains.follows.entities import Follow
from chirper.domains.identity.entities import User

logger = logging.getLogger(__name__)


class FollowService:
    """Сервис подписок"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.follow_repository = FollowRepository(session)
        self.user_repository = UserRepository(session)

    async def create_follow(self, follow: Follow) -> Follow:
        await run_guards(
            follow,
            self.followed_user_exists,
            self.not_already_following,
            self.not_self
        )

        follow = await self.follow_repository.create(follow)
        logger.info(f"User {follow.follower_id} followed user {follow.followed_id}")
        return follow

    async def delete_follow(self, follow: Follow) -> None:
        await run_guards(follow, self.follow_exists)

        await self.follow_repository.delete(follow)
        logger.info(f"User {follow.follower_id} unfollowed user {follow.followed_id}")

    async def followers(self, user_id: int) -> List[User]:
        return await self.follow_repository.followers(user_id)

    async def following(self, user_id: int) -> List[User]:
        return await self.follow_repository.following(user_id)

    async def followed_user_exists(self, follow: Follow) -> None:
        try:
            await self.user_repository.get_by_id(follow.followed_id)
        except NotFound:
            raise NotFound("The user to be followed does not exist.")

    async def not_already_following(self, follow: Follow) -> None:
        try:
            await self.follow_repository.get(follow.follower_id, follow.followed_id)
        except NotFound:
            return
        raise InvalidInput("You already follow this user.")

    def not_self(self, follow: Follow) -> None:
        if follow.follower_id == follow.followed_id:
            raise InvalidInput("You cannot follow yourself.")

    async def follow_exists(self, follow: Follow) -> None:
        try:
            stored = await self.follow_repository.get(follow.follower_id, follow.followed_id)
        except NotFound:
            raise InvalidInput("You cannot unfollow a user you're not following.")
        follow.id = stored.id
        follow.created_at = stored.created_at
