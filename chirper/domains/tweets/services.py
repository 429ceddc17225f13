import logging
from functools import partial
from typing import List, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from chirper.core.errors import InvalidInput, NotFound, Unauthorized
from chirper.core.validation import run_guards
from chirper.db.repositories.tweet_repository import TweetRepository
from chirper.domains.images.entities import OWNER_TYPE_TWEET
from chirper.domains.images.services import ImageService
from chirper.domains.tweets.entities import CONTENT_MAX_LENGTH, Tweet

logger = logging.getLogger(__name__)

MAX_TWEET_IMAGES = 4


class TweetService:
    """Сервис твитов: создание, ответы, ретвиты, удаление и выборки"""

    def __init__(self, session: AsyncSession, images: ImageService):
        self.session = session
        self.images = images
        self.tweet_repository = TweetRepository(session)

    async def create_tweet(self, tweet: Tweet) -> Tweet:
        """Создание твита, ответа или ретвита"""
        await run_guards(
            tweet,
            self.user_id_valid,
            self.replied_to_exists,
            self.retweeted_exists,
            self.retweeted_is_no_retweet,
            self.not_already_retweeted,
            self.content_min_length,
            self.content_max_length
        )

        tweet = await self.tweet_repository.create(tweet)
        logger.info(f"User {tweet.user_id} created tweet {tweet.id}")
        return tweet

    async def delete_tweet(self, tweet: Tweet, user_id: int) -> Tweet:
        """Удаление твита автором вместе с прямыми ответами, ретвитами, лайками и изображениями"""
        await run_guards(
            tweet,
            self.id_valid,
            self.tweet_exists,
            partial(self.belongs_to, user_id=user_id)
        )

        tweet = await self.tweet_repository.soft_delete_cascade(tweet)
        await self.images.delete_all(OWNER_TYPE_TWEET, tweet.id)
        logger.info(f"User {user_id} deleted tweet {tweet.id}")
        return tweet

    async def get_tweet(self, tweet_id: int) -> Tweet:
        tweet = await self.tweet_repository.get_with_counts(tweet_id)
        return await self._with_images(tweet)

    async def get_feed(self, offset: int = 0) -> List[Tweet]:
        return await self._with_images_all(await self.tweet_repository.feed(offset))

    async def get_user_tweets(self, user_id: int, offset: int = 0) -> List[Tweet]:
        return await self._with_images_all(await self.tweet_repository.by_user(user_id, offset))

    async def get_liked_tweets(self, user_id: int, offset: int = 0) -> List[Tweet]:
        return await self._with_images_all(await self.tweet_repository.liked_by(user_id, offset))

    async def attach_images(self, tweet_id: int, user_id: int, files: Sequence[Tuple[bytes, str]]) -> Tweet:
        """Добавление изображений к своему твиту, всего не больше четырех"""
        tweet = await self.tweet_repository.get_by_id(tweet_id)
        if tweet.user_id != user_id:
            raise Unauthorized("You are not allowed to edit this tweet.")

        existing = await self.images.by_owner(OWNER_TYPE_TWEET, tweet.id)
        if len(existing) + len(files) > MAX_TWEET_IMAGES:
            raise InvalidInput(f"Too many images, not more than {MAX_TWEET_IMAGES} allowed.")

        # Пока хоть один файл не прошел проверки, на диск ничего не пишется
        prepared = [
            await self.images.prepare_image(OWNER_TYPE_TWEET, tweet.id, content, filename)
            for content, filename in files
        ]
        for img in prepared:
            await self.images.save(img)
        return await self.get_tweet(tweet.id)

    async def _with_images(self, tweet: Tweet) -> Tweet:
        tweet.images = await self.images.by_owner(OWNER_TYPE_TWEET, tweet.id)
        return tweet

    async def _with_images_all(self, tweets: List[Tweet]) -> List[Tweet]:
        for tweet in tweets:
            await self._with_images(tweet)
        return tweets

    # Проверки создания

    def user_id_valid(self, tweet: Tweet) -> None:
        if not tweet.user_id or tweet.user_id <= 0:
            raise InvalidInput("A user ID is required.")

    async def replied_to_exists(self, tweet: Tweet) -> None:
        if tweet.replies_to_id is None:
            return
        try:
            await self.tweet_repository.get_by_id(tweet.replies_to_id)
        except NotFound:
            raise NotFound("Tweet replied to does not exist.")

    async def retweeted_exists(self, tweet: Tweet) -> None:
        if tweet.retweets_id is None:
            return
        try:
            await self.tweet_repository.get_by_id(tweet.retweets_id)
        except NotFound:
            raise NotFound("The retweeted tweet does not exist.")

    async def retweeted_is_no_retweet(self, tweet: Tweet) -> None:
        if tweet.retweets_id is None:
            return
        retweeted = await self.tweet_repository.get_by_id(tweet.retweets_id)
        if retweeted.is_retweet:
            raise InvalidInput("You cannot retweet a retweet.")

    async def not_already_retweeted(self, tweet: Tweet) -> None:
        if tweet.retweets_id is None:
            return
        try:
            await self.tweet_repository.find_retweet(tweet.user_id, tweet.retweets_id)
        except NotFound:
            return
        raise InvalidInput("You already retweeted that tweet.")

    def content_min_length(self, tweet: Tweet) -> None:
        # Пустой текст допустим только у ретвита
        if tweet.is_retweet:
            return
        if not tweet.content.replace(" ", ""):
            raise InvalidInput("Tweet content must not be empty.")

    def content_max_length(self, tweet: Tweet) -> None:
        if len(tweet.content) > CONTENT_MAX_LENGTH:
            raise InvalidInput(f"Tweet content max length is {CONTENT_MAX_LENGTH} characters.")

    # Проверки удаления

    def id_valid(self, tweet: Tweet) -> None:
        if not tweet.id or tweet.id <= 0:
            raise InvalidInput("Tweet ID is invalid.")

    async def tweet_exists(self, tweet: Tweet) -> None:
        stored = await self.tweet_repository.get_by_id(tweet.id)
        tweet.user_id = stored.user_id
        tweet.content = stored.content
        tweet.replies_to_id = stored.replies_to_id
        tweet.retweets_id = stored.retweets_id
        tweet.created_at = stored.created_at
        tweet.updated_at = stored.updated_at

    def belongs_to(self, tweet: Tweet, user_id: int) -> None:
        if tweet.user_id != user_id:
            raise Unauthorized("You are not allowed to delete this tweet.")
