from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.shopadmin.core.deps import AccessScope, require_access
from app.shopadmin.core.policy import Action
from app.shopadmin.schemas.errors import ERROR_RESPONSES
from app.shopadmin.schemas.uploads import (
    BatchImageUploadResponse,
    ImageDeleteRequest,
    ImageDeleteResponse,
    ImageUploadResponse,
)
from app.shopadmin.services.images import ImageStorageService, ImageUpload

router = APIRouter(prefix="/upload", responses=ERROR_RESPONSES)


def get_image_service(request: Request) -> ImageStorageService:
    return request.app.state.image_service


def _read_upload(file: UploadFile, max_bytes: int) -> ImageUpload:
    # Read one byte past the cap so oversize files are detected without buffering them whole.
    data = file.file.read(max_bytes + 1)
    return ImageUpload(filename=file.filename or "upload", content_type=file.content_type, data=data)


@router.post("/image", response_model=ImageUploadResponse)
def upload_image(
    image: UploadFile = File(...),
    scope: AccessScope = Depends(require_access("uploads", Action.CREATE)),
    service: ImageStorageService = Depends(get_image_service),
):
    upload = _read_upload(image, service.settings.IMAGE_MAX_BYTES)
    return service.upload_image(upload, store_id=scope.store_id, trace_id=scope.trace_id)


@router.post("/images", response_model=BatchImageUploadResponse)
def upload_images(
    images: list[UploadFile] = File(...),
    scope: AccessScope = Depends(require_access("uploads", Action.CREATE)),
    service: ImageStorageService = Depends(get_image_service),
):
    uploads = [_read_upload(image, service.settings.IMAGE_MAX_BYTES) for image in images]
    uploaded, failed = service.upload_images(uploads, store_id=scope.store_id, trace_id=scope.trace_id)
    return {"uploaded": uploaded, "failed": failed}


@router.delete("/image", response_model=ImageDeleteResponse)
def delete_image(
    payload: ImageDeleteRequest,
    scope: AccessScope = Depends(require_access("uploads", Action.DELETE)),
    service: ImageStorageService = Depends(get_image_service),
):
    service.delete_image(payload.public_id, store_id=scope.store_id, trace_id=scope.trace_id)
    return {"public_id": payload.public_id, "deleted": True}
