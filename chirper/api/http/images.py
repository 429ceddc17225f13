from fastapi import APIRouter, Depends, File, UploadFile

from chirper.api.deps import get_user_service, read_upload
from chirper.core.auth import require_user
from chirper.domains.identity.entities import User
from chirper.domains.identity.schemas import ProfileResponse
from chirper.domains.identity.services import UserService

router = APIRouter(prefix="/api", tags=["images"])


@router.post("/upload/user/{image_type}", response_model=ProfileResponse)
async def upload_user_image(
    image_type: str,
    image: UploadFile = File(...),
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service)
):
    """Загрузка аватара или шапки профиля"""
    content = await read_upload(image)
    return await users.replace_image(current_user, image_type, content, image.filename or "")


@router.delete("/delete/user/{image_type}", response_model=ProfileResponse)
async def delete_user_image(
    image_type: str,
    current_user: User = Depends(require_user),
    users: UserService = Depends(get_user_service)
):
    return await users.remove_image(current_user, image_type)
