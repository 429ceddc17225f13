from typing import List

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import aliased

from chirper.core.errors import NotFound
from chirper.db.base import utcnow
from chirper.db.models.like import Like as LikeModel
from chirper.db.models.tweet import Tweet as TweetModel
from chirper.db.repositories.base import BaseRepository
from chirper.domains.tweets.entities import Tweet

TWEET_NOT_FOUND = "The tweet does not exist."
PAGE_SIZE = 10


def _counted_select():
    """SELECT твитов вместе с количеством ответов, ретвитов и лайков"""
    replies = aliased(TweetModel)
    retweets = aliased(TweetModel)

    replies_count = (
        select(func.count(replies.id))
        .where(replies.replies_to_id == TweetModel.id, replies.deleted_at.is_(None))
        .correlate(TweetModel)
        .scalar_subquery()
    )
    retweets_count = (
        select(func.count(retweets.id))
        .where(retweets.retweets_id == TweetModel.id, retweets.deleted_at.is_(None))
        .correlate(TweetModel)
        .scalar_subquery()
    )
    likes_count = (
        select(func.count(LikeModel.id))
        .where(LikeModel.tweet_id == TweetModel.id)
        .correlate(TweetModel)
        .scalar_subquery()
    )
    return select(
        TweetModel,
        replies_count.label("replies_count"),
        retweets_count.label("retweets_count"),
        likes_count.label("likes_count")
    )


class TweetRepository(BaseRepository):
    """Репозиторий твитов, ответов и ретвитов"""

    async def create(self, tweet: Tweet) -> Tweet:
        db_tweet = TweetModel(
            user_id=tweet.user_id,
            content=tweet.content,
            replies_to_id=tweet.replies_to_id,
            retweets_id=tweet.retweets_id
        )

        self.session.add(db_tweet)
        await self._commit()

        tweet.id = db_tweet.id
        tweet.created_at = db_tweet.created_at
        tweet.updated_at = db_tweet.updated_at
        return tweet

    async def get_by_id(self, tweet_id: int) -> Tweet:
        """Получение неудаленного твита по id"""
        result = await self._execute(
            select(TweetModel).where(TweetModel.id == tweet_id, TweetModel.deleted_at.is_(None))
        )
        db_tweet = result.scalar_one_or_none()
        if db_tweet is None:
            raise NotFound(TWEET_NOT_FOUND)
        return self._to_domain(db_tweet)

    async def get_with_counts(self, tweet_id: int) -> Tweet:
        result = await self._execute(
            _counted_select().where(TweetModel.id == tweet_id, TweetModel.deleted_at.is_(None))
        )
        row = result.one_or_none()
        if row is None:
            raise NotFound(TWEET_NOT_FOUND)
        return self._row_to_domain(row)

    async def find_retweet(self, user_id: int, retweets_id: int) -> Tweet:
        """Поиск действующего ретвита пользователя на указанный твит"""
        result = await self._execute(
            select(TweetModel)
            .where(
                TweetModel.user_id == user_id,
                TweetModel.retweets_id == retweets_id,
                TweetModel.deleted_at.is_(None)
            )
            .limit(1)
        )
        db_tweet = result.scalar_one_or_none()
        if db_tweet is None:
            raise NotFound(TWEET_NOT_FOUND)
        return self._to_domain(db_tweet)

    async def feed(self, offset: int = 0, limit: int = PAGE_SIZE) -> List[Tweet]:
        """Лента: новые твиты всех пользователей"""
        stmt = (
            _counted_select()
            .where(TweetModel.deleted_at.is_(None))
            .order_by(TweetModel.created_at.desc(), TweetModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return await self._list(stmt)

    async def by_user(self, user_id: int, offset: int = 0, limit: int = PAGE_SIZE) -> List[Tweet]:
        """Твиты, ответы и ретвиты пользователя"""
        stmt = (
            _counted_select()
            .where(TweetModel.user_id == user_id, TweetModel.deleted_at.is_(None))
            .order_by(TweetModel.created_at.desc(), TweetModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return await self._list(stmt)

    async def liked_by(self, user_id: int, offset: int = 0, limit: int = PAGE_SIZE) -> List[Tweet]:
        """Твиты, которые лайкнул пользователь, начиная с последнего лайка"""
        stmt = (
            _counted_select()
            .join(LikeModel, LikeModel.tweet_id == TweetModel.id)
            .where(LikeModel.user_id == user_id, TweetModel.deleted_at.is_(None))
            .order_by(LikeModel.created_at.desc(), LikeModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return await self._list(stmt)

    async def soft_delete_cascade(self, tweet: Tweet) -> Tweet:
        """Удаление твита вместе с прямыми ответами и ретвитами; лайки удаляются физически"""
        deleted_at = utcnow()
        await self._execute(
            update(TweetModel)
            .where(
                or_(
                    TweetModel.id == tweet.id,
                    TweetModel.replies_to_id == tweet.id,
                    TweetModel.retweets_id == tweet.id
                ),
                TweetModel.deleted_at.is_(None)
            )
            .values(deleted_at=deleted_at)
        )
        await self._execute(delete(LikeModel).where(LikeModel.tweet_id == tweet.id))
        await self._commit()

        tweet.deleted_at = deleted_at
        return tweet

    async def _list(self, stmt) -> List[Tweet]:
        result = await self._execute(stmt)
        return [self._row_to_domain(row) for row in result.all()]

    def _row_to_domain(self, row) -> Tweet:
        tweet = self._to_domain(row[0])
        tweet.replies_count = row.replies_count
        tweet.retweets_count = row.retweets_count
        tweet.likes_count = row.likes_count
        return tweet

    def _to_domain(self, db_tweet: TweetModel) -> Tweet:
        """Преобразование модели БД в доменную сущность"""
        return Tweet(
            id=db_tweet.id,
            user_id=db_tweet.user_id,
            content=db_tweet.content,
            replies_to_id=db_tweet.replies_to_id,
            retweets_id=db_tweet.retweets_id,
            created_at=db_tweet.created_at,
            updated_at=db_tweet.updated_at,
            deleted_at=db_tweet.deleted_at
        )
