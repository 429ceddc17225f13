from fastapi import Depends, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from chirper.core.config import Settings, get_settings
from chirper.core.db import get_db
from chirper.domains.follows.services import FollowService
from chirper.domains.identity.services import UserService
from chirper.domains.images.entities import MAX_UPLOAD_SIZE
from chirper.domains.images.services import ImageService
from chirper.domains.likes.services import LikeService
from chirper.domains.oauth.github import GitHubClient
from chirper.domains.oauth.services import OAuthService, OAuthSignIn
from chirper.domains.tweets.services import TweetService


def get_image_service(settings: Settings = Depends(get_settings)) -> ImageService:
    return ImageService(settings.images_dir)


def get_user_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    images: ImageService = Depends(get_image_service)
) -> UserService:
    """Секреты передаются в сервис явно, из настроек текущего запроса"""
    return UserService(db, pepper=settings.pepper, hmac_key=settings.hmac_key, images=images)


def get_tweet_service(
    db: AsyncSession = Depends(get_db),
    images: ImageService = Depends(get_image_service)
) -> TweetService:
    return TweetService(db, images)


def get_follow_service(db: AsyncSession = Depends(get_db)) -> FollowService:
    return FollowService(db)


def get_like_service(db: AsyncSession = Depends(get_db)) -> LikeService:
    return LikeService(db)


def get_oauth_service(db: AsyncSession = Depends(get_db)) -> OAuthService:
    return OAuthService(db)


def get_oauth_sign_in(
    users: UserService = Depends(get_user_service),
    oauth: OAuthService = Depends(get_oauth_service)
) -> OAuthSignIn:
    return OAuthSignIn(users, oauth)


def get_github_client(settings: Settings = Depends(get_settings)) -> GitHubClient:
    return GitHubClient(
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
        redirect_url=settings.github_redirect_url
    )


async def read_upload(upload: UploadFile) -> bytes:
    """Содержимое загруженного файла, но не больше лимита плюс один байт"""
    return await upload.read(MAX_UPLOAD_SIZE + 1)
