from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class TweetCreate(BaseModel):
    """Схема для создания твита или ответа"""
    content: str = Field(default="", max_length=1120)


class RetweetCreate(BaseModel):
    """Схема для ретвита; текст необязателен"""
    content: str = Field(default="", max_length=1120)


class ImageResponse(BaseModel):
    url: str

    model_config = ConfigDict(from_attributes=True)


class TweetResponse(BaseModel):
    """Схема для ответа с данными твита"""
    id: int
    user_id: int
    content: str
    replies_to_id: Optional[int] = None
    retweets_id: Optional[int] = None
    replies_count: int = 0
    retweets_count: int = 0
    likes_count: int = 0
    images: List[ImageResponse] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
