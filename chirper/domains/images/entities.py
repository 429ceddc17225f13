from dataclasses import dataclass

OWNER_TYPE_USER = "user"
OWNER_TYPE_TWEET = "tweet"
OWNER_TYPES = (OWNER_TYPE_USER, OWNER_TYPE_TWEET)

IMAGES_URL_PREFIX = "images"
MAX_UPLOAD_SIZE = 5 << 20  # 5 MiB


@dataclass
class Image:
    """Загруженное изображение; хранится только как файл images/{owner_type}/{owner_id}/{filename}"""

    owner_type: str
    owner_id: int
    filename: str = ""
    content: bytes = b""
    extension: str = ""
    content_type: str = ""

    @property
    def relative_path(self) -> str:
        return f"{self.owner_type}/{self.owner_id}/{self.filename}"

    @property
    def url(self) -> str:
        return f"/{IMAGES_URL_PREFIX}/{self.relative_path}"

    @property
    def size(self) -> int:
        return len(self.content)
