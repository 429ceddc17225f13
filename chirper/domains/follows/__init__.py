from chirper.domains.follows.entities import Follow
from chirper.domains.follows.schemas import FollowResponse

__all__ = ["Follow", "FollowResponse"]
