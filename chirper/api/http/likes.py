from fastapi import APIRouter, Depends, status

from chirper.api.deps import get_like_service
from chirper.core.auth import require_user
from chirper.domains.identity.entities import User
from chirper.domains.likes.entities import Like
from chirper.domains.likes.schemas import LikeResponse
from chirper.domains.likes.services import LikeService

router = APIRouter(prefix="/api", tags=["likes"])


@router.post("/like/{tweet_id}", response_model=LikeResponse, status_code=status.HTTP_201_CREATED)
async def like(
    tweet_id: int,
    current_user: User = Depends(require_user),
    likes: LikeService = Depends(get_like_service)
):
    return await likes.create_like(Like(user_id=current_user.id, tweet_id=tweet_id))


@router.post("/unlike/{tweet_id}")
async def unlike(
    tweet_id: int,
    current_user: User = Depends(require_user),
    likes: LikeService = Depends(get_like_service)
):
    await likes.delete_like(Like(user_id=current_user.id, tweet_id=tweet_id))
    return {"message": "Unliked"}
