from datetime import datetime
from typing import Optional

from chirper.domains.images.entities import OWNER_TYPE_USER, Image


class User:
    """Сущность пользователя домена Identity"""

    def __init__(
        self,
        id: Optional[int] = None,
        email: str = "",
        name: str = "",
        handle: str = "",
        bio: str = "",
        avatar: str = "",
        header: str = "",
        password: str = "",
        password_hash: str = "",
        remember: str = "",
        remember_hash: str = "",
        no_password_needed: bool = False,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        deleted_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.name = name
        self.handle = handle
        self.bio = bio
        self.avatar = avatar
        self.header = header
        self.created_at = created_at
        self.updated_at = updated_at
        self.deleted_at = deleted_at

        # Пароль в открытом виде живет только до хеширования
        self.password = password
        self.password_hash = password_hash

        # Remember-токен в открытом виде никогда не сохраняется, только его HMAC
        self.remember = remember
        self.remember_hash = remember_hash

        # True для аккаунтов, созданных через OAuth; в базу не пишется
        self.no_password_needed = no_password_needed

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def avatar_url(self) -> Optional[str]:
        return self._image_url(self.avatar)

    @property
    def header_url(self) -> Optional[str]:
        return self._image_url(self.header)

    def _image_url(self, filename: str) -> Optional[str]:
        if not filename or self.id is None:
            return None
        return Image(owner_type=OWNER_TYPE_USER, owner_id=self.id, filename=filename).url

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id is not None and self.id == other.id

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, handle={self.handle})"
