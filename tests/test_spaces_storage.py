"""Tests for the Spaces adapter: save, save_raw, exists, delete and read."""

import io
from datetime import datetime

import pytest
from botocore.exceptions import ClientError
from PIL import Image

from spaces_storage.core.exceptions import (ImageProcessingError,
                                            ImageProcessingUnavailableError,
                                            NotManagedByStoreError)
from spaces_storage.core.integrations.images import ImageResizer

SPACE_URL = "https://media.fra1.digitaloceanspaces.com"
TARGET_DIR = "blog/2024/05"
VARIANT_KEYS = [
    f"{TARGET_DIR}/My-Photo_w100.webp",
    f"{TARGET_DIR}/My-Photo_w300.webp",
    f"{TARGET_DIR}/My-Photo_w500.webp",
    f"{TARGET_DIR}/My-Photo_w1000.webp",
]


@pytest.mark.asyncio
async def test_save_image_uploads_every_size_variant(storage, fake_s3, jpeg_image):
    url = await storage.save(jpeg_image, TARGET_DIR)

    assert url == f"{SPACE_URL}/{TARGET_DIR}/My-Photo_w1000.webp"
    assert sorted(fake_s3.objects) == sorted(VARIANT_KEYS)
    for stored in fake_s3.objects.values():
        assert stored["Bucket"] == "media"
        assert stored["ACL"] == "public-read"
        assert stored["CacheControl"] == "max-age=31536000"
        assert stored["ContentType"] == "image/webp"


@pytest.mark.asyncio
async def test_saved_variants_are_not_larger_than_original(storage, fake_s3, jpeg_image):
    with open(jpeg_image.path, "rb") as original_file:
        original = original_file.read()
    with Image.open(io.BytesIO(original)) as image:
        original_size = image.size

    await storage.save(jpeg_image, TARGET_DIR)

    widths = {}
    for key in VARIANT_KEYS:
        body = fake_s3.objects[key]["Body"]
        assert len(body) <= len(original)
        with Image.open(io.BytesIO(body)) as variant:
            assert variant.width <= original_size[0]
            assert variant.height <= original_size[1]
            widths[key] = variant.width

    assert widths[f"{TARGET_DIR}/My-Photo_w100.webp"] == 100
    assert widths[f"{TARGET_DIR}/My-Photo_w1000.webp"] == 1000


@pytest.mark.asyncio
async def test_read_returns_saved_canonical_variant(storage, fake_s3, jpeg_image):
    url = await storage.save(jpeg_image, TARGET_DIR)

    content = await storage.read({"path": url})

    assert content == fake_s3.objects[f"{TARGET_DIR}/My-Photo_w1000.webp"]["Body"]


@pytest.mark.asyncio
async def test_saving_same_image_twice_gets_new_base_name(storage, fake_s3, jpeg_image):
    first = await storage.save(jpeg_image, TARGET_DIR)
    second = await storage.save(jpeg_image, TARGET_DIR)

    assert first != second
    assert second == f"{SPACE_URL}/{TARGET_DIR}/My-Photo-1_w1000.webp"
    assert f"{TARGET_DIR}/My-Photo-1_w100.webp" in fake_s3.objects
    assert len(fake_s3.objects) == 8


@pytest.mark.asyncio
async def test_save_image_fails_when_one_upload_fails(storage, fake_s3, jpeg_image):
    fake_s3.fail_keys.add(f"{TARGET_DIR}/My-Photo_w300.webp")

    with pytest.raises(ClientError):
        await storage.save(jpeg_image, TARGET_DIR)

    # already written variants are not rolled back
    assert f"{TARGET_DIR}/My-Photo_w100.webp" in fake_s3.objects
    assert f"{TARGET_DIR}/My-Photo_w1000.webp" in fake_s3.objects
    assert f"{TARGET_DIR}/My-Photo_w300.webp" not in fake_s3.objects


@pytest.mark.asyncio
async def test_save_image_without_pillow_fails(make_storage, fake_s3, jpeg_image):
    storage = make_storage(resizer=ImageResizer(available=False))

    with pytest.raises(ImageProcessingUnavailableError):
        await storage.save(jpeg_image, TARGET_DIR)

    assert fake_s3.objects == {}


@pytest.mark.asyncio
async def test_save_image_fails_when_one_resize_fails(make_storage, fake_s3, jpeg_image):
    class FailingResizer(ImageResizer):
        async def resize(self, original, profile):
            if profile.width == 500:
                raise ImageProcessingError(cause=OSError("truncated image"))
            return await super().resize(original, profile)

    storage = make_storage(resizer=FailingResizer())

    with pytest.raises(ImageProcessingError) as exc_info:
        await storage.save(jpeg_image, TARGET_DIR)

    assert exc_info.value.status_code == 500
    assert f"{TARGET_DIR}/My-Photo_w500.webp" not in fake_s3.objects
    assert f"{TARGET_DIR}/My-Photo_w100.webp" in fake_s3.objects


@pytest.mark.asyncio
async def test_save_non_raster_file_uploads_it_verbatim(storage, fake_s3, pdf_file):
    url = await storage.save(pdf_file, "docs")

    key = "docs/Annual-Report-2024.pdf"
    assert url == f"{SPACE_URL}/{key}"
    assert list(fake_s3.objects) == [key]
    stored = fake_s3.objects[key]
    with open(pdf_file.path, "rb") as original:
        assert stored["Body"] == original.read()
    assert stored["ContentType"] == "application/pdf"
    assert stored["ACL"] == "public-read"
    assert stored["CacheControl"] == "max-age=31536000"


@pytest.mark.asyncio
async def test_save_accepts_host_dict_and_uses_default_dir(storage, fake_s3, pdf_file):
    now = datetime.now()

    url = await storage.save(pdf_file.model_dump())

    expected_key = f"blog/{now:%Y}/{now:%m}/Annual-Report-2024.pdf"
    assert url == f"{SPACE_URL}/{expected_key}"
    assert expected_key in fake_s3.objects


@pytest.mark.asyncio
async def test_save_raw_stores_bytes_at_path(storage, fake_s3):
    url = await storage.save_raw(b"webp-bytes", "/blog/raw_w100.webp")

    assert url == f"{SPACE_URL}//blog/raw_w100.webp"
    assert fake_s3.objects["blog/raw_w100.webp"]["Body"] == b"webp-bytes"
    assert fake_s3.objects["blog/raw_w100.webp"]["ContentType"] == "image/webp"
    assert await storage.exists("raw_w100.webp", "blog")


@pytest.mark.asyncio
async def test_exists_reports_uploaded_files(storage, pdf_file):
    assert not await storage.exists("Annual-Report-2024.pdf", "docs")

    await storage.save(pdf_file, "docs")

    assert await storage.exists("Annual-Report-2024.pdf", "docs")


@pytest.mark.asyncio
async def test_exists_collapses_store_errors_to_false(storage, fake_s3):
    fake_s3.objects["docs/a.pdf"] = {"Body": b""}
    fake_s3.fail_operations.add("head_object")

    assert await storage.exists("a.pdf", "docs") is False


@pytest.mark.asyncio
async def test_delete_then_exists_is_false(storage, pdf_file):
    await storage.save(pdf_file, "docs")

    assert await storage.delete("Annual-Report-2024.pdf", "docs") is True
    assert await storage.exists("Annual-Report-2024.pdf", "docs") is False


@pytest.mark.asyncio
async def test_delete_collapses_store_errors_to_false(storage, fake_s3):
    fake_s3.fail_operations.add("delete_object")

    assert await storage.delete("a.pdf", "docs") is False


@pytest.mark.asyncio
async def test_read_rejects_foreign_url_without_store_call(storage, fake_s3):
    with pytest.raises(NotManagedByStoreError) as exc_info:
        await storage.read({"path": "https://cdn.example.com/blog/a.webp"})

    assert exc_info.value.status_code == 400
    assert fake_s3.calls == []


@pytest.mark.asyncio
async def test_read_ignores_trailing_slash(storage, fake_s3):
    fake_s3.objects["blog/a.webp"] = {"Body": b"content", "ContentType": "image/webp"}

    assert await storage.read({"path": f"{SPACE_URL}/blog/a.webp/"}) == b"content"


@pytest.mark.asyncio
async def test_read_propagates_store_errors(storage):
    with pytest.raises(ClientError) as exc_info:
        await storage.read({"path": f"{SPACE_URL}/blog/missing.webp"})

    assert exc_info.value.response["Error"]["Code"] == "NoSuchKey"


@pytest.mark.asyncio
async def test_default_space_url_round_trips_despite_double_slash(make_storage, fake_s3, pdf_file):
    storage = make_storage(space_url=None)

    url = await storage.save(pdf_file, "docs")

    assert url == "https://media.fra1.digitaloceanspaces.com//docs/Annual-Report-2024.pdf"
    assert await storage.read({"path": url}) == fake_s3.objects["docs/Annual-Report-2024.pdf"]["Body"]
