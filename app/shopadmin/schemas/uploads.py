from pydantic import Field

from app.shopadmin.schemas.common import ApiModel


class ImageUploadResponse(ApiModel):
    url: str
    public_id: str
    width: int
    height: int


class ImageUploadFailure(ApiModel):
    filename: str
    code: str
    message: str


class BatchImageUploadResponse(ApiModel):
    uploaded: list[ImageUploadResponse] = Field(default_factory=list)
    failed: list[ImageUploadFailure] = Field(default_factory=list)


class ImageDeleteRequest(ApiModel):
    public_id: str = Field(..., min_length=1)


class ImageDeleteResponse(ApiModel):
    public_id: str
    deleted: bool = True
