from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint

from chirper.db.base import BaseModel


class Like(BaseModel):
    __tablename__ = "likes"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tweet_id = Column(Integer, ForeignKey("tweets.id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("user_id", "tweet_id", name="uq_likes_user_tweet"),
    )
