from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from chirper.db.base import BaseModel


class OAuth(BaseModel):
    __tablename__ = "oauths"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider = Column(String(32), nullable=False)
    provider_user_id = Column(String(255), nullable=False)

    access_token = Column(String(512), nullable=False, default="")
    token_type = Column(String(32), nullable=False, default="")
    refresh_token = Column(String(512), nullable=False, default="")
    expiry = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        # Одна привязка на провайдера для пользователя
        UniqueConstraint("user_id", "provider", name="uq_oauths_user_provider"),
        UniqueConstraint("provider", "provider_user_id", name="uq_oauths_provider_identity"),
    )
