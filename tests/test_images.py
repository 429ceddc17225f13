from pathlib import Path

import pytest

from chirper.core.errors import InvalidInput, NotFound, Unauthorized
from chirper.domains.images.entities import MAX_UPLOAD_SIZE, OWNER_TYPE_TWEET, OWNER_TYPE_USER, Image
from chirper.domains.images.services import sniff_content_type

from tests.conftest import GIF_BYTES, JPEG_BYTES, PNG_BYTES


def test_sniff_content_type():
    assert sniff_content_type(PNG_BYTES) == "image/png"
    assert sniff_content_type(JPEG_BYTES) == "image/jpeg"
    assert sniff_content_type(GIF_BYTES) == "image/gif"
    assert sniff_content_type(b"hello") == "application/octet-stream"


async def test_upload_png(images, settings):
    img = await images.upload_image(OWNER_TYPE_USER, 1, PNG_BYTES, "me.PNG")

    assert img.extension == ".png"
    assert img.content_type == "image/png"
    assert img.filename.endswith(".png")
    assert img.filename != "me.PNG"
    assert img.url == f"/images/user/1/{img.filename}"
    assert (Path(settings.images_dir) / img.relative_path).read_bytes() == PNG_BYTES


async def test_upload_normalizes_jpg_extension(images):
    img = await images.upload_image(OWNER_TYPE_TWEET, 3, JPEG_BYTES, "photo.jpg")

    assert img.extension == ".jpeg"
    assert img.filename.endswith(".jpeg")


@pytest.mark.parametrize("filename", ["cat.gif", "cat.png", "cat.jpeg"])
async def test_gif_is_rejected_regardless_of_extension(images, filename):
    with pytest.raises(InvalidInput):
        await images.upload_image(OWNER_TYPE_USER, 1, GIF_BYTES, filename)


async def test_invalid_extension(images):
    with pytest.raises(InvalidInput) as exc_info:
        await images.upload_image(OWNER_TYPE_USER, 1, PNG_BYTES, "notes.txt")

    assert exc_info.value.message == "Image notes.txt invalid extension, must be .jpeg or .png"


async def test_content_type_must_match_extension(images):
    with pytest.raises(InvalidInput) as exc_info:
        await images.upload_image(OWNER_TYPE_USER, 1, PNG_BYTES, "fake.jpeg")

    assert exc_info.value.message == "Image fake.jpeg content-type image/png does not match extension .jpeg."


async def test_upload_size_limit(images):
    content = PNG_BYTES + b"\x00" * MAX_UPLOAD_SIZE

    with pytest.raises(InvalidInput) as exc_info:
        await images.upload_image(OWNER_TYPE_USER, 1, content, "big.png")

    assert exc_info.value.message == "Image big.png exceeds upload size limit of 5MB."


async def test_invalid_owner_type(images):
    with pytest.raises(InvalidInput):
        await images.upload_image("group", 1, PNG_BYTES, "me.png")


async def test_generated_filenames_are_unique(images):
    uploaded = [await images.upload_image(OWNER_TYPE_TWEET, 1, PNG_BYTES, "a.png") for _ in range(5)]

    assert len({img.filename for img in uploaded}) == 5
    assert [img.filename for img in await images.by_owner(OWNER_TYPE_TWEET, 1)] == sorted(
        img.filename for img in uploaded
    )


async def test_delete_and_delete_all(images):
    first = await images.upload_image(OWNER_TYPE_TWEET, 1, PNG_BYTES, "a.png")
    await images.upload_image(OWNER_TYPE_TWEET, 1, PNG_BYTES, "b.png")

    await images.delete(first)
    assert len(await images.by_owner(OWNER_TYPE_TWEET, 1)) == 1

    await images.delete_all(OWNER_TYPE_TWEET, 1)
    assert await images.by_owner(OWNER_TYPE_TWEET, 1) == []
    # Повторная очистка пустой папки не ошибка
    await images.delete_all(OWNER_TYPE_TWEET, 1)


async def test_delete_missing_image(images):
    with pytest.raises(NotFound):
        await images.delete(Image(owner_type=OWNER_TYPE_USER, owner_id=1, filename="nope.png"))


async def test_replace_avatar_removes_old_file(user_service, images, alice):
    user = await user_service.replace_image(alice, "avatar", PNG_BYTES, "a.png")
    first = user.avatar
    user = await user_service.replace_image(user, "header", JPEG_BYTES, "h.jpg")
    user = await user_service.replace_image(user, "avatar", PNG_BYTES, "b.png")

    stored = {img.filename for img in await images.by_owner(OWNER_TYPE_USER, alice.id)}
    assert stored == {user.avatar, user.header}
    assert first not in stored
    assert user.avatar_url == f"/images/user/{alice.id}/{user.avatar}"
    assert (await user_service.get_user(alice.id)).avatar == user.avatar


async def test_replace_image_with_unknown_type(user_service, alice):
    with pytest.raises(InvalidInput) as exc_info:
        await user_service.replace_image(alice, "banner", PNG_BYTES, "a.png")

    assert exc_info.value.message == "Invalid image type, must be 'avatar' or 'header'."


async def test_remove_avatar(user_service, images, alice):
    user = await user_service.replace_image(alice, "avatar", PNG_BYTES, "a.png")

    user = await user_service.remove_image(user, "avatar")

    assert user.avatar == ""
    assert user.avatar_url is None
    assert await images.by_owner(OWNER_TYPE_USER, alice.id) == []


async def test_tweet_images(tweet_service, make_tweet, alice):
    tweet = await make_tweet(alice)

    tweet = await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "a.png"), (JPEG_BYTES, "b.jpg")])

    assert len(tweet.images) == 2
    assert all(img.url.startswith(f"/images/tweet/{tweet.id}/") for img in tweet.images)


async def test_tweet_images_limit(tweet_service, make_tweet, alice):
    tweet = await make_tweet(alice)

    with pytest.raises(InvalidInput) as exc_info:
        await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "a.png")] * 5)

    assert exc_info.value.message == "Too many images, not more than 4 allowed."


async def test_tweet_images_of_other_user(tweet_service, make_tweet, alice, bob):
    tweet = await make_tweet(alice)

    with pytest.raises(Unauthorized):
        await tweet_service.attach_images(tweet.id, bob.id, [(PNG_BYTES, "a.png")])


async def test_deleting_tweet_purges_images(tweet_service, images, make_tweet, alice):
    tweet = await make_tweet(alice)
    await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "a.png")])

    await tweet_service.delete_tweet(tweet, alice.id)

    assert await images.by_owner(OWNER_TYPE_TWEET, tweet.id) == []


async def test_tweet_images_are_added_to_existing(tweet_service, make_tweet, alice):
    tweet = await make_tweet(alice)
    first = await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "a.png")])

    tweet = await tweet_service.attach_images(tweet.id, alice.id, [(JPEG_BYTES, "b.jpg")])

    assert len(tweet.images) == 2
    assert first.images[0].filename in [img.filename for img in tweet.images]


async def test_tweet_images_limit_counts_existing(tweet_service, make_tweet, alice):
    tweet = await make_tweet(alice)
    await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "a.png")] * 3)

    with pytest.raises(InvalidInput):
        await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "b.png")] * 2)

    assert len((await tweet_service.get_tweet(tweet.id)).images) == 3


async def test_failed_batch_keeps_existing_images(tweet_service, images, make_tweet, alice):
    tweet = await make_tweet(alice)
    before = (await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "old.png")])).images

    with pytest.raises(InvalidInput):
        await tweet_service.attach_images(tweet.id, alice.id, [(PNG_BYTES, "a.png"), (GIF_BYTES, "b.png")])

    assert await images.by_owner(OWNER_TYPE_TWEET, tweet.id) == before
