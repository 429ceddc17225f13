from chirper.domains.tweets.entities import Tweet
from chirper.domains.tweets.schemas import TweetCreate, RetweetCreate, ImageResponse, TweetResponse

__all__ = [
    "Tweet",
    "TweetCreate", "RetweetCreate", "ImageResponse", "TweetResponse"
]
