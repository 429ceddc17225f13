from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint

from chirper.db.base import BaseModel


class Follow(BaseModel):
    __tablename__ = "follows"

    follower_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    followed_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("follower_id", "followed_id", name="uq_follows_follower_followed"),
    )
