from fastapi import APIRouter, Depends, status

from chirper.api.deps import get_follow_service
from chirper.core.auth import require_user
from chirper.domains.follows.entities import Follow
from chirper.domains.follows.schemas import FollowResponse
from chirper.domains.follows.services import FollowService
from chirper.domains.identity.entities import User

router = APIRouter(prefix="/api", tags=["follows"])


@router.post("/follow/{followed_id}", response_model=FollowResponse, status_code=status.HTTP_201_CREATED)
async def follow(
    followed_id: int,
    current_user: User = Depends(require_user),
    follows: FollowService = Depends(get_follow_service)
):
    return await follows.create_follow(Follow(follower_id=current_user.id, followed_id=followed_id))


@router.delete("/unfollow/{followed_id}")
async def unfollow(
    followed_id: int,
    current_user: User = Depends(require_user),
    follows: FollowService = Depends(get_follow_service)
):
    await follows.delete_follow(Follow(follower_id=current_user.id, followed_id=followed_id))
    return {"message": "Unfollowed"}
