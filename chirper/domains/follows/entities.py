from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Follow:
    """Направленная связь: follower подписан на followed"""

    follower_id: int
    followed_id: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None
