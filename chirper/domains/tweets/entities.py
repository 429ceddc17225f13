from datetime import datetime
from typing import List, Optional

from chirper.domains.images.entities import Image

CONTENT_MAX_LENGTH = 280


class Tweet:
    """Сущность твита: обычный твит, ответ или ретвит"""

    def __init__(
        self,
        id: Optional[int] = None,
        user_id: Optional[int] = None,
        content: str = "",
        replies_to_id: Optional[int] = None,
        retweets_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        deleted_at: Optional[datetime] = None
    ):
        self.id = id
        self.user_id = user_id
        self.content = content
        self.replies_to_id = replies_to_id
        self.retweets_id = retweets_id
        self.created_at = created_at
        self.updated_at = updated_at
        self.deleted_at = deleted_at

        # Производные значения, в базе не хранятся
        self.replies_count = 0
        self.retweets_count = 0
        self.likes_count = 0
        self.images: List[Image] = []

    @property
    def is_retweet(self) -> bool:
        return self.retweets_id is not None

    @property
    def is_reply(self) -> bool:
        return self.replies_to_id is not None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tweet):
            return False
        return self.id is not None and self.id == other.id

    def __repr__(self) -> str:
        return f"Tweet(id={self.id}, user_id={self.user_id}, retweets_id={self.retweets_id})"
