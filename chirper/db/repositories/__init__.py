from chirper.db.repositories.user_repository import UserRepository
from chirper.db.repositories.tweet_repository import TweetRepository
from chirper.db.repositories.follow_repository import FollowRepository
from chirper.db.repositories.like_repository import LikeRepository
from chirper.db.repositories.oauth_repository import OAuthRepository

__all__ = [
    "UserRepository",
    "TweetRepository",
    "FollowRepository",
    "LikeRepository",
    "OAuthRepository"
]
