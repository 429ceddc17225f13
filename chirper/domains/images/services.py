import logging
import os
import shutil
import time
import uuid
from pathlib import Path
from typing import List

from starlette.concurrency import run_in_threadpool

from chirper.core.errors import Internal, InvalidInput, NotFound
from chirper.core.validation import run_guards
from chirper.domains.images.entities import MAX_UPLOAD_SIZE, OWNER_TYPES, Image

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg")
ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/png")

# Сигнатуры файлов, по которым определяется реальный тип содержимого
_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def sniff_content_type(content: bytes) -> str:
    """Тип содержимого по первым байтам файла, а не по тому, что прислал клиент"""
    head = content[:512]
    for signature, content_type in _SIGNATURES:
        if head.startswith(signature):
            return content_type
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    return "application/octet-stream"


def owner_type_valid(img: Image) -> None:
    if img.owner_type not in OWNER_TYPES:
        raise InvalidInput("Invalid owner type, must be 'user' or 'tweet'.")


def extension_valid(img: Image) -> None:
    ext = os.path.splitext(img.filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidInput(f"Image {img.filename} invalid extension, must be .jpeg or .png")
    img.extension = ".jpeg" if ext == ".jpg" else ext


def content_type_valid(img: Image) -> None:
    content_type = sniff_content_type(img.content)
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidInput(f"Image {img.filename} invalid content-type, must be image/jpeg or image/png.")
    img.content_type = content_type


def content_type_matches_extension(img: Image) -> None:
    if img.content_type.removeprefix("image/") != img.extension.removeprefix("."):
        raise InvalidInput(
            f"Image {img.filename} content-type {img.content_type} does not match extension {img.extension}."
        )


def below_max_size(img: Image) -> None:
    if img.size > MAX_UPLOAD_SIZE:
        raise InvalidInput(
            f"Image {img.filename} exceeds upload size limit of {MAX_UPLOAD_SIZE // 1000000}MB."
        )


def generate_filename(img: Image) -> None:
    # Метка времени в микросекундах + случайный суффикс против коллизий
    timestamp = time.time_ns() // 1000
    img.filename = f"{timestamp}_{uuid.uuid4().hex[:8]}{img.extension}"


class ImageService:
    """Хранилище изображений на файловой системе: {images_dir}/{owner_type}/{owner_id}/{filename}"""

    def __init__(self, images_dir: str):
        self.root = Path(images_dir)

    async def upload_image(self, owner_type: str, owner_id: int, content: bytes, filename: str) -> Image:
        """Проверка и сохранение загруженного изображения под сгенерированным именем"""
        img = await self.prepare_image(owner_type, owner_id, content, filename)
        return await self.save(img)

    async def prepare_image(self, owner_type: str, owner_id: int, content: bytes, filename: str) -> Image:
        """Проверки загрузки без записи на диск"""
        img = Image(owner_type=owner_type, owner_id=owner_id, filename=filename or "", content=content)
        await run_guards(
            img,
            owner_type_valid,
            extension_valid,
            content_type_valid,
            content_type_matches_extension,
            below_max_size,
            generate_filename
        )
        return img

    async def save(self, img: Image) -> Image:
        await run_in_threadpool(self._write, img)
        logger.info(f"Stored image {img.relative_path}")
        return img

    async def by_owner(self, owner_type: str, owner_id: int) -> List[Image]:
        """Все изображения владельца, отсортированные по имени (то есть по времени загрузки)"""
        directory = self._owner_dir(owner_type, owner_id)
        filenames = await run_in_threadpool(self._list, directory)
        return [Image(owner_type=owner_type, owner_id=owner_id, filename=name) for name in filenames]

    async def delete(self, img: Image) -> None:
        path = self.root / img.relative_path
        try:
            await run_in_threadpool(path.unlink)
        except FileNotFoundError as e:
            raise NotFound("The image does not exist.") from e
        except OSError as e:
            raise Internal(f"failed to delete image {path}: {e}") from e

    async def delete_all(self, owner_type: str, owner_id: int) -> None:
        """Удаление всей папки владельца"""
        directory = self._owner_dir(owner_type, owner_id)
        try:
            await run_in_threadpool(shutil.rmtree, directory)
        except FileNotFoundError:
            return
        except OSError as e:
            raise Internal(f"failed to delete images in {directory}: {e}") from e

    def _owner_dir(self, owner_type: str, owner_id: int) -> Path:
        return self.root / owner_type / str(owner_id)

    def _write(self, img: Image) -> None:
        directory = self._owner_dir(img.owner_type, img.owner_id)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            (directory / img.filename).write_bytes(img.content)
        except OSError as e:
            raise Internal(f"failed to store image {img.relative_path}: {e}") from e

    @staticmethod
    def _list(directory: Path) -> List[str]:
        if not directory.is_dir():
            return []
        return sorted(entry.name for entry in directory.iterdir() if entry.is_file())
