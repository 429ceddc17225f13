from chirper.domains.identity.entities import User
from chirper.domains.identity.schemas import (
    UserCreate, UserLogin, UserUpdate, UserResponse, ProfileResponse
)

__all__ = [
    "User",
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "ProfileResponse"
]
