from pydantic import BaseModel, ConfigDict
from datetime import datetime


class LikeResponse(BaseModel):
    user_id: int
    tweet_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
