import pytest

from chirper.core.errors import InvalidInput, NotFound
from chirper.domains.follows.entities import Follow


async def test_follow_and_listings(follow_service, alice, bob):
    follow = await follow_service.create_follow(Follow(follower_id=alice.id, followed_id=bob.id))

    assert follow.id is not None
    assert [u.id for u in await follow_service.followers(bob.id)] == [alice.id]
    assert [u.id for u in await follow_service.following(alice.id)] == [bob.id]
    assert await follow_service.followers(alice.id) == []


async def test_follow_twice_is_rejected(follow_service, alice, bob):
    await follow_service.create_follow(Follow(follower_id=alice.id, followed_id=bob.id))

    with pytest.raises(InvalidInput) as exc_info:
        await follow_service.create_follow(Follow(follower_id=alice.id, followed_id=bob.id))

    assert exc_info.value.message == "You already follow this user."


async def test_follow_self_is_rejected(follow_service, alice):
    with pytest.raises(InvalidInput) as exc_info:
        await follow_service.create_follow(Follow(follower_id=alice.id, followed_id=alice.id))

    assert exc_info.value.message == "You cannot follow yourself."


async def test_follow_missing_user(follow_service, alice):
    with pytest.raises(NotFound) as exc_info:
        await follow_service.create_follow(Follow(follower_id=alice.id, followed_id=999))

    assert exc_info.value.message == "The user to be followed does not exist."


async def test_unfollow(follow_service, alice, bob):
    await follow_service.create_follow(Follow(follower_id=alice.id, followed_id=bob.id))

    await follow_service.delete_follow(Follow(follower_id=alice.id, followed_id=bob.id))

    assert await follow_service.following(alice.id) == []


async def test_unfollow_when_not_following(follow_service, alice, bob):
    with pytest.raises(InvalidInput) as exc_info:
        await follow_service.delete_follow(Follow(follower_id=alice.id, followed_id=bob.id))

    assert exc_info.value.message == "You cannot unfollow a user you're not following."


async def test_unique_constraint_backs_the_check(follow_service, alice, bob):
    # Обход проверок: повторная вставка упирается в ограничение базы
    await follow_service.follow_repository.create(Follow(follower_id=alice.id, followed_id=bob.id))

    with pytest.raises(InvalidInput) as exc_info:
        await follow_service.follow_repository.create(Follow(follower_id=alice.id, followed_id=bob.id))

    assert exc_info.value.message == "You already follow this user."
