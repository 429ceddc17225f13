from typing import List

from fastapi import APIRouter, Depends, Query, Response

from chirper.api.deps import get_follow_service, get_tweet_service, get_user_service
from chirper.core.auth import clear_remember_cookie, require_user
from chirper.core.config import Settings, get_settings
from chirper.domains.follows.services import FollowService
from chirper.domains.identity.entities import User
from chirper.domains.identity.schemas import ProfileResponse, UserResponse, UserUpdate
from chirper.domains.identity.services import UserService
from chirper.domains.tweets.schemas import TweetResponse
from chirper.domains.tweets.services import TweetService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.put("/me", response_model=ProfileResponse)
async def update_me(
    update_data: UserUpdate,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service)
):
    """Обновление профиля текущего пользователя"""
    return await users.update_profile(current_user, **update_data.model_dump(exclude_unset=True))


@router.delete("/me")
async def delete_me(
    response: Response,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings)
):
    """Удаление аккаунта текущего пользователя"""
    await users.delete_user(current_user)

    clear_remember_cookie(response, settings)
    return {"message": "Account deleted"}


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, users: UserService = Depends(get_user_service)):
    return await users.get_user(user_id)


@router.get("/{user_id}/tweets", response_model=List[TweetResponse])
async def get_user_tweets(
    user_id: int,
    offset: int = Query(0, ge=0),
    tweets: TweetService = Depends(get_tweet_service)
):
    """Твиты, ответы и ретвиты пользователя, по 10 штук"""
    return await tweets.get_user_tweets(user_id, offset)


@router.get("/{user_id}/likes", response_model=List[TweetResponse])
async def get_user_likes(
    user_id: int,
    offset: int = Query(0, ge=0),
    tweets: TweetService = Depends(get_tweet_service)
):
    """Твиты, которые лайкнул пользователь"""
    return await tweets.get_liked_tweets(user_id, offset)


@router.get("/{user_id}/followers", response_model=List[UserResponse])
async def get_followers(user_id: int, follows: FollowService = Depends(get_follow_service)):
    return await follows.followers(user_id)


@router.get("/{user_id}/following", response_model=List[UserResponse])
async def get_following(user_id: int, follows: FollowService = Depends(get_follow_service)):
    return await follows.following(user_id)
