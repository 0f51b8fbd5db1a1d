import io

import pytest
from botocore.exceptions import ClientError
from PIL import Image

from app.shopadmin.core.error_catalog import AppError, ErrorCatalog
from app.shopadmin.services.images import ImageStorageService, ImageUpload, UploadedImage, UploadFailure
from tests.image_helpers import FakeS3Client, configured_service, png_bytes, storage_settings


class _FailingS3Client:
    def put_object(self, **kwargs):
        raise ClientError({"Error": {"Code": "InvalidArgument", "Message": "invalid ACL"}}, "PutObject")


def test_endpoint_host_without_scheme_is_normalized():
    service = ImageStorageService(storage_settings())
    assert service._normalized_endpoint_url() == "https://nyc3.digitaloceanspaces.com"


def test_endpoint_with_scheme_is_not_duplicated():
    service = ImageStorageService(storage_settings(STORAGE_ENDPOINT="https://nyc3.digitaloceanspaces.com/"))
    assert service._normalized_endpoint_url() == "https://nyc3.digitaloceanspaces.com"


def test_upload_stores_under_store_prefix_with_public_acl(monkeypatch):
    fake_client = FakeS3Client()
    service = configured_service(monkeypatch, fake_client)

    result = service.upload_image(
        ImageUpload("photo.png", "image/png", png_bytes()), store_id="store-1", trace_id="trace-123"
    )

    assert result.public_id.startswith("shopadmin/stores/store-1/")
    assert result.public_id.endswith(".png")
    assert result.url == f"https://cdn.example.com/{result.public_id}"
    assert (result.width, result.height) == (40, 20)
    payload = fake_client.calls[0]
    assert payload["Bucket"] == "bucket"
    assert payload["ACL"] == "public-read"
    assert payload["ContentType"] == "image/png"


def test_large_images_are_resized_to_max_dimension(monkeypatch):
    fake_client = FakeS3Client()
    service = configured_service(monkeypatch, fake_client)

    result = service.upload_image(ImageUpload("big.png", "image/png", png_bytes(2400, 1200)), store_id="s")

    assert (result.width, result.height) == (1200, 600)
    stored = Image.open(io.BytesIO(fake_client.calls[0]["Body"]))
    assert stored.size == (1200, 600)


@pytest.mark.parametrize(
    ("upload", "expected"),
    [
        (ImageUpload("notes.txt", "text/plain", b"hello"), ErrorCatalog.UNSUPPORTED_MEDIA_TYPE),
        (ImageUpload("fake.png", "image/png", b"not really a png"), ErrorCatalog.INVALID_IMAGE),
        (ImageUpload("empty.png", "image/png", b""), ErrorCatalog.INVALID_IMAGE),
    ],
)
def test_rejected_uploads(monkeypatch, upload, expected):
    service = configured_service(monkeypatch, FakeS3Client())

    with pytest.raises(AppError) as exc:
        service.upload_image(upload, store_id="s")
    assert exc.value.error == expected


def test_size_cap_is_enforced(monkeypatch):
    service = configured_service(monkeypatch, FakeS3Client(), IMAGE_MAX_BYTES=64)

    with pytest.raises(AppError) as exc:
        service.upload_image(ImageUpload("photo.png", "image/png", png_bytes(200, 200)), store_id="s")
    assert exc.value.error == ErrorCatalog.IMAGE_TOO_LARGE


def test_missing_storage_settings_are_reported():
    service = ImageStorageService(storage_settings(STORAGE_BUCKET=""))

    with pytest.raises(AppError) as exc:
        service.upload_image(ImageUpload("photo.png", "image/png", png_bytes()), store_id="s")
    assert exc.value.error == ErrorCatalog.STORAGE_NOT_CONFIGURED
    assert exc.value.details == {"missing": ["STORAGE_BUCKET"]}


def test_provider_error_maps_to_upstream_failure(monkeypatch, caplog):
    service = configured_service(monkeypatch, _FailingS3Client())

    with pytest.raises(AppError) as exc:
        service.upload_image(ImageUpload("photo.png", "image/png", png_bytes()), store_id="s", trace_id="t-1")
    assert exc.value.error == ErrorCatalog.UPSTREAM_FAILURE
    assert exc.value.details == {"provider_code": "InvalidArgument"}
    assert any(record.message == "image_upload_error" for record in caplog.records)


def test_batch_collects_successes_and_failures_in_order(monkeypatch):
    fake_client = FakeS3Client()
    service = configured_service(monkeypatch, fake_client)
    uploads = [
        ImageUpload("a.png", "image/png", png_bytes()),
        ImageUpload("b.txt", "text/plain", b"nope"),
        ImageUpload("c.png", "image/png", png_bytes(10, 10)),
    ]

    uploaded, failed = service.upload_images(uploads, store_id="s")

    assert [type(item) for item in uploaded] == [UploadedImage, UploadedImage]
    assert [(item.width, item.height) for item in uploaded] == [(40, 20), (10, 10)]
    assert failed == [UploadFailure(filename="b.txt", code="UNSUPPORTED_MEDIA_TYPE", message="Only image files are allowed")]
    assert len(fake_client.calls) == 2


def test_batch_size_is_capped(monkeypatch):
    service = configured_service(monkeypatch, FakeS3Client(), IMAGE_BATCH_MAX_FILES=1)
    uploads = [ImageUpload(f"{index}.png", "image/png", png_bytes()) for index in range(2)]

    with pytest.raises(AppError) as exc:
        service.upload_images(uploads, store_id="s")
    assert exc.value.error == ErrorCatalog.VALIDATION_ERROR


def test_delete_refuses_keys_outside_store_prefix(monkeypatch):
    fake_client = FakeS3Client()
    service = configured_service(monkeypatch, fake_client)

    for public_id in ("shopadmin/stores/other/x.png", "shopadmin/stores/s/../other/x.png"):
        with pytest.raises(AppError) as exc:
            service.delete_image(public_id, store_id="s")
        assert exc.value.error == ErrorCatalog.NOT_FOUND

    service.delete_image("shopadmin/stores/s/x.png", store_id="s")
    assert fake_client.deleted == [{"Bucket": "bucket", "Key": "shopadmin/stores/s/x.png"}]


def test_decompression_bomb_is_an_invalid_image(monkeypatch):
    service = configured_service(monkeypatch, FakeS3Client())
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(AppError) as exc:
        service.upload_image(ImageUpload("bomb.png", "image/png", png_bytes(40, 20)), store_id="s")
    assert exc.value.error == ErrorCatalog.INVALID_IMAGE


def test_batch_keeps_going_past_a_decompression_bomb(monkeypatch):
    fake_client = FakeS3Client()
    service = configured_service(monkeypatch, fake_client)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    uploads = [
        ImageUpload("bomb.png", "image/png", png_bytes(40, 20)),
        ImageUpload("small.png", "image/png", png_bytes(10, 10)),
    ]

    uploaded, failed = service.upload_images(uploads, store_id="s")

    assert [(item.width, item.height) for item in uploaded] == [(10, 10)]
    assert [(item.filename, item.code) for item in failed] == [("bomb.png", "INVALID_IMAGE")]
    assert len(fake_client.calls) == 1


def test_batch_reports_unexpected_worker_errors_per_file(monkeypatch):
    fake_client = FakeS3Client()
    service = configured_service(monkeypatch, fake_client)
    original_prepare = service.prepare

    def flaky_prepare(upload):
        if upload.filename == "broken.png":
            raise RuntimeError("decoder crashed")
        return original_prepare(upload)

    monkeypatch.setattr(service, "prepare", flaky_prepare)
    uploads = [
        ImageUpload("broken.png", "image/png", png_bytes()),
        ImageUpload("fine.png", "image/png", png_bytes()),
    ]

    uploaded, failed = service.upload_images(uploads, store_id="s")

    assert len(uploaded) == 1
    assert [(item.filename, item.code) for item in failed] == [("broken.png", "INTERNAL_ERROR")]
