from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from chirper.api.deps import get_tweet_service, read_upload
from chirper.core.auth import require_user
from chirper.domains.identity.entities import User
from chirper.domains.tweets.entities import Tweet
from chirper.domains.tweets.schemas import RetweetCreate, TweetCreate, TweetResponse
from chirper.domains.tweets.services import TweetService

router = APIRouter(prefix="/api", tags=["tweets"])


@router.get("/feed", response_model=List[TweetResponse])
async def get_feed(
    offset: int = Query(0, ge=0),
    tweets: TweetService = Depends(get_tweet_service)
):
    """Лента: 10 новых твитов начиная со смещения offset"""
    return await tweets.get_feed(offset)


@router.post("/tweet", response_model=TweetResponse, status_code=status.HTTP_201_CREATED)
async def create_tweet(
    tweet_data: TweetCreate,
    current_user: User = Depends(require_user),
    tweets: TweetService = Depends(get_tweet_service)
):
    tweet = Tweet(user_id=current_user.id, content=tweet_data.content)
    return await tweets.create_tweet(tweet)


@router.get("/tweet/{tweet_id}", response_model=TweetResponse)
async def get_tweet(tweet_id: int, tweets: TweetService = Depends(get_tweet_service)):
    return await tweets.get_tweet(tweet_id)


@router.post("/reply/{replies_to_id}", response_model=TweetResponse, status_code=status.HTTP_201_CREATED)
async def create_reply(
    replies_to_id: int,
    tweet_data: TweetCreate,
    current_user: User = Depends(require_user),
    tweets: TweetService = Depends(get_tweet_service)
):
    tweet = Tweet(user_id=current_user.id, content=tweet_data.content, replies_to_id=replies_to_id)
    return await tweets.create_tweet(tweet)


@router.post("/retweet/{retweets_id}", response_model=TweetResponse, status_code=status.HTTP_201_CREATED)
async def create_retweet(
    retweets_id: int,
    tweet_data: Optional[RetweetCreate] = None,
    current_user: User = Depends(require_user),
    tweets: TweetService = Depends(get_tweet_service)
):
    content = tweet_data.content if tweet_data else ""
    tweet = Tweet(user_id=current_user.id, content=content, retweets_id=retweets_id)
    return await tweets.create_tweet(tweet)


@router.delete("/tweet/delete/{tweet_id}")
async def delete_tweet(
    tweet_id: int,
    current_user: User = Depends(require_user),
    tweets: TweetService = Depends(get_tweet_service)
):
    """Удаление своего твита"""
    await tweets.delete_tweet(Tweet(id=tweet_id), current_user.id)
    return {"message": "Tweet deleted"}


@router.post("/upload/tweet/{tweet_id}", response_model=TweetResponse)
async def upload_tweet_images(
    tweet_id: int,
    images: List[UploadFile] = File(...),
    current_user: User = Depends(require_user),
    tweets: TweetService = Depends(get_tweet_service)
):
    """Загрузка до четырех изображений к своему твиту"""
    files = [(await read_upload(image), image.filename or "") for image in images]
    return await tweets.attach_images(tweet_id, current_user.id, files)
