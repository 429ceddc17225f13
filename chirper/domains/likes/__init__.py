from chirper.domains.likes.entities import Like
from chirper.domains.likes.schemas import LikeResponse

__all__ = ["Like", "LikeResponse"]
