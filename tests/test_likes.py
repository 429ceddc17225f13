import pytest

from chirper.core.errors import InvalidInput, NotFound
from chirper.domains.likes.entities import Like


async def test_like_and_unlike(like_service, make_tweet, alice, bob):
    tweet = await make_tweet(alice)

    like = await like_service.create_like(Like(user_id=bob.id, tweet_id=tweet.id))

    assert like.id is not None
    assert await like_service.user_likes(bob.id, tweet.id)
    assert [like.tweet_id for like in await like_service.likes_of(bob.id)] == [tweet.id]

    await like_service.delete_like(Like(user_id=bob.id, tweet_id=tweet.id))

    assert not await like_service.user_likes(bob.id, tweet.id)
    assert await like_service.likes_of(bob.id) == []


async def test_like_twice_is_rejected(like_service, make_tweet, alice, bob):
    tweet = await make_tweet(alice)
    await like_service.create_like(Like(user_id=bob.id, tweet_id=tweet.id))

    with pytest.raises(InvalidInput) as exc_info:
        await like_service.create_like(Like(user_id=bob.id, tweet_id=tweet.id))

    assert exc_info.value.message == "You already like that tweet."


async def test_like_missing_tweet(like_service, bob):
    with pytest.raises(NotFound) as exc_info:
        await like_service.create_like(Like(user_id=bob.id, tweet_id=999))

    assert exc_info.value.message == "The liked tweet does not exist."


async def test_unlike_without_like(like_service, make_tweet, alice, bob):
    tweet = await make_tweet(alice)

    with pytest.raises(NotFound) as exc_info:
        await like_service.delete_like(Like(user_id=bob.id, tweet_id=tweet.id))

    assert exc_info.value.message == "You cannot unlike a tweet you have not liked."
