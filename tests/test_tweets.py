import pytest

from chirper.core.errors import InvalidInput, NotFound, Unauthorized
from chirper.domains.likes.entities import Like
from chirper.domains.tweets.entities import Tweet


async def test_create_tweet(tweet_service, alice):
    tweet = await tweet_service.create_tweet(Tweet(user_id=alice.id, content="first!"))

    assert tweet.id is not None
    assert tweet.created_at is not None
    stored = await tweet_service.get_tweet(tweet.id)
    assert stored.content == "first!"
    assert stored.user_id == alice.id


@pytest.mark.parametrize("content", ["", "   "])
async def test_create_tweet_requires_content(tweet_service, alice, content):
    with pytest.raises(InvalidInput) as exc_info:
        await tweet_service.create_tweet(Tweet(user_id=alice.id, content=content))

    assert exc_info.value.message == "Tweet content must not be empty."


async def test_only_spaces_count_as_empty_content(tweet_service, alice):
    tweet = await tweet_service.create_tweet(Tweet(user_id=alice.id, content="\t\n"))

    assert tweet.content == "\t\n"


async def test_create_tweet_content_max_length(tweet_service, alice):
    # Длина считается в символах, а не в байтах
    await tweet_service.create_tweet(Tweet(user_id=alice.id, content="ж" * 280))

    with pytest.raises(InvalidInput) as exc_info:
        await tweet_service.create_tweet(Tweet(user_id=alice.id, content="ж" * 281))

    assert exc_info.value.message == "Tweet content max length is 280 characters."


async def test_create_tweet_requires_author(tweet_service):
    with pytest.raises(InvalidInput):
        await tweet_service.create_tweet(Tweet(user_id=None, content="orphan"))


async def test_reply_to_missing_tweet(tweet_service, alice):
    with pytest.raises(NotFound) as exc_info:
        await tweet_service.create_tweet(Tweet(user_id=alice.id, content="hi", replies_to_id=999))

    assert exc_info.value.message == "Tweet replied to does not exist."


async def test_retweet_with_empty_content(tweet_service, make_tweet, alice, bob):
    original = await make_tweet(alice)

    retweet = await tweet_service.create_tweet(Tweet(user_id=bob.id, content="", retweets_id=original.id))

    assert retweet.id is not None
    assert retweet.is_retweet


async def test_retweet_of_missing_tweet(tweet_service, bob):
    with pytest.raises(NotFound) as exc_info:
        await tweet_service.create_tweet(Tweet(user_id=bob.id, retweets_id=999))

    assert exc_info.value.message == "The retweeted tweet does not exist."


async def test_retweet_of_retweet_is_rejected(tweet_service, make_tweet, alice, bob):
    original = await make_tweet(alice)
    retweet = await make_tweet(bob, content="", retweets_id=original.id)

    with pytest.raises(InvalidInput) as exc_info:
        await tweet_service.create_tweet(Tweet(user_id=alice.id, retweets_id=retweet.id))

    assert exc_info.value.message == "You cannot retweet a retweet."


async def test_retweet_twice_is_rejected(tweet_service, make_tweet, alice, bob):
    original = await make_tweet(alice)
    await make_tweet(bob, content="", retweets_id=original.id)

    with pytest.raises(InvalidInput) as exc_info:
        await tweet_service.create_tweet(Tweet(user_id=bob.id, retweets_id=original.id))

    assert exc_info.value.message == "You already retweeted that tweet."


async def test_counts(tweet_service, like_service, make_tweet, alice, bob):
    original = await make_tweet(alice)
    await make_tweet(bob, content="reply", replies_to_id=original.id)
    await make_tweet(bob, content="", retweets_id=original.id)
    await like_service.create_like(Like(user_id=bob.id, tweet_id=original.id))

    tweet = await tweet_service.get_tweet(original.id)

    assert tweet.replies_count == 1
    assert tweet.retweets_count == 1
    assert tweet.likes_count == 1


async def test_feed_is_paged_newest_first(tweet_service, make_tweet, alice):
    created = [await make_tweet(alice, content=f"tweet {i}") for i in range(12)]

    first_page = await tweet_service.get_feed()
    second_page = await tweet_service.get_feed(offset=10)

    assert [t.id for t in first_page] == [t.id for t in reversed(created)][:10]
    assert [t.id for t in second_page] == [created[1].id, created[0].id]


async def test_user_tweets_and_liked_tweets(tweet_service, like_service, make_tweet, alice, bob):
    alice_tweet = await make_tweet(alice)
    await make_tweet(bob, content="bob's")
    await like_service.create_like(Like(user_id=bob.id, tweet_id=alice_tweet.id))

    alice_tweets = await tweet_service.get_user_tweets(alice.id)
    bob_likes = await tweet_service.get_liked_tweets(bob.id)

    assert [t.id for t in alice_tweets] == [alice_tweet.id]
    assert [t.id for t in bob_likes] == [alice_tweet.id]


async def test_delete_tweet_cascades(tweet_service, like_service, make_tweet, alice, bob):
    original = await make_tweet(alice)
    reply = await make_tweet(bob, content="reply", replies_to_id=original.id)
    retweet = await make_tweet(bob, content="", retweets_id=original.id)
    reply_to_reply = await make_tweet(alice, content="deeper", replies_to_id=reply.id)
    await like_service.create_like(Like(user_id=bob.id, tweet_id=original.id))

    deleted = await tweet_service.delete_tweet(Tweet(id=original.id), alice.id)

    assert deleted.deleted_at is not None
    for tweet_id in (original.id, reply.id, retweet.id):
        with pytest.raises(NotFound):
            await tweet_service.get_tweet(tweet_id)
    # Каскад только на один уровень
    assert (await tweet_service.get_tweet(reply_to_reply.id)).id == reply_to_reply.id
    assert not await like_service.user_likes(bob.id, original.id)


async def test_delete_tweet_of_other_user(tweet_service, make_tweet, alice, bob):
    original = await make_tweet(alice)

    with pytest.raises(Unauthorized):
        await tweet_service.delete_tweet(Tweet(id=original.id), bob.id)

    assert (await tweet_service.get_tweet(original.id)).id == original.id


async def test_delete_missing_tweet(tweet_service, alice):
    with pytest.raises(NotFound):
        await tweet_service.delete_tweet(Tweet(id=999), alice.id)


async def test_delete_tweet_invalid_id(tweet_service, alice):
    with pytest.raises(InvalidInput):
        await tweet_service.delete_tweet(Tweet(id=0), alice.id)


async def test_retweet_allowed_again_after_deleting_retweet(tweet_service, make_tweet, alice, bob):
    original = await make_tweet(alice)
    retweet = await make_tweet(bob, content="", retweets_id=original.id)
    await tweet_service.delete_tweet(Tweet(id=retweet.id), bob.id)

    again = await tweet_service.create_tweet(Tweet(user_id=bob.id, retweets_id=original.id))

    assert again.id != retweet.id
