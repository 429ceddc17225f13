from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from chirper.db.base import BaseModel


class Tweet(BaseModel):
    __tablename__ = "tweets"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(String(1120), nullable=False, default="")
    replies_to_id = Column(Integer, ForeignKey("tweets.id"), nullable=True, index=True)
    retweets_id = Column(Integer, ForeignKey("tweets.id"), nullable=True, index=True)
    deleted_at = Column(DateTime(timezone=True), index=True, nullable=True)

    __table_args__ = (
        Index("idx_tweets_user_created", "user_id", "created_at"),
    )
