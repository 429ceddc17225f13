from chirper.api.http.auth import router as auth_router
from chirper.api.http.users import router as users_router
from chirper.api.http.tweets import router as tweets_router
from chirper.api.http.follows import router as follows_router
from chirper.api.http.likes import router as likes_router
from chirper.api.http.images import router as images_router
from chirper.api.http.oauth import router as oauth_router

__all__ = [
    "auth_router",
    "users_router",
    "tweets_router",
    "follows_router",
    "likes_router",
    "images_router",
    "oauth_router"
]
