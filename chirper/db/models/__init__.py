from chirper.db.models.user import User
from chirper.db.models.tweet import Tweet
from chirper.db.models.follow import Follow
from chirper.db.models.like import Like
from chirper.db.models.oauth import OAuth

__all__ = [
    "User",
    "Tweet",
    "Follow",
    "Like",
    "OAuth"
]
