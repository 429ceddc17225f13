from pydantic import BaseModel, ConfigDict
from datetime import datetime


class FollowResponse(BaseModel):
    follower_id: int
    followed_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
