from chirper.domains.images.entities import Image, OWNER_TYPE_USER, OWNER_TYPE_TWEET

__all__ = ["Image", "OWNER_TYPE_USER", "OWNER_TYPE_TWEET"]
