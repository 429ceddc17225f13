from sqlalchemy import Column, DateTime, String

from chirper.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    name = Column(String(64), nullable=False, default="")
    handle = Column(String(64), index=True, nullable=False, default="")
    bio = Column(String(640), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=False)
    avatar = Column(String(255), nullable=False, default="")
    header = Column(String(255), nullable=False, default="")
    password_hash = Column(String(255), nullable=False, default="")
    remember_hash = Column(String(255), unique=True, index=True, nullable=False)
    deleted_at = Column(DateTime(timezone=True), index=True, nullable=True)
