from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Like:
    """Лайк пользователя на твит"""

    user_id: int
    tweet_id: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None
