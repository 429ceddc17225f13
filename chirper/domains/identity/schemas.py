from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Схема для регистрации пользователя"""
    # Формат email и длины проверяются цепочкой проверок сервиса после нормализации
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)
    name: str = Field(..., max_length=64)
    handle: str = Field(..., max_length=64)
    bio: str = Field(default="", max_length=640)


class UserLogin(BaseModel):
    """Схема для входа пользователя"""
    email: str
    password: str


class UserUpdate(BaseModel):
    """Схема для обновления профиля"""
    name: Optional[str] = Field(None, max_length=64)
    handle: Optional[str] = Field(None, max_length=64)
    bio: Optional[str] = Field(None, max_length=640)
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)


class UserResponse(BaseModel):
    """Публичные данные пользователя"""
    id: int
    name: str
    handle: str
    bio: str
    avatar_url: Optional[str] = None
    header_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(UserResponse):
    """Данные вошедшего пользователя"""
    email: str
