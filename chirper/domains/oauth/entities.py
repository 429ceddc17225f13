from dataclasses import dataclass
from datetime import datetime
from typing import Optional

PROVIDER_GITHUB = "github"


class OAuthLink:
    """Привязка пользователя к учетной записи у OAuth-провайдера"""

    def __init__(
        self,
        user_id: Optional[int] = None,
        provider: str = "",
        provider_user_id: str = "",
        access_token: str = "",
        token_type: str = "",
        refresh_token: str = "",
        expiry: Optional[datetime] = None,
        id: Optional[int] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.user_id = user_id
        self.provider = provider
        self.provider_user_id = provider_user_id
        self.access_token = access_token
        self.token_type = token_type
        self.refresh_token = refresh_token
        self.expiry = expiry
        self.created_at = created_at
        self.updated_at = updated_at

    def refresh_tokens(self, identity: "ProviderIdentity") -> None:
        """Обновление токенов из свежей авторизации у провайдера"""
        self.access_token = identity.access_token
        self.token_type = identity.token_type
        self.refresh_token = identity.refresh_token
        self.expiry = identity.expiry

    def __repr__(self) -> str:
        return f"OAuthLink(id={self.id}, user_id={self.user_id}, provider={self.provider})"


@dataclass
class ProviderIdentity:
    """Проверенная личность пользователя у провайдера"""

    provider: str
    provider_user_id: str
    name: str = ""
    handle: str = ""
    email: Optional[str] = None
    access_token: str = ""
    token_type: str = ""
    refresh_token: str = ""
    expiry: Optional[datetime] = None

    def to_link(self, user_id: Optional[int] = None) -> OAuthLink:
        return OAuthLink(
            user_id=user_id,
            provider=self.provider,
            provider_user_id=self.provider_user_id,
            access_token=self.access_token,
            token_type=self.token_type,
            refresh_token=self.refresh_token,
            expiry=self.expiry
        )
