import io
import os
from pathlib import Path
from typing import Any, Dict, List, Set, Tuple

import pytest
from botocore.exceptions import ClientError
from PIL import Image

from spaces_storage import SpacesStorage
from spaces_storage.schemas import StorageImageSchema

SPACE_URL = "https://media.fra1.digitaloceanspaces.com"


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": 404 if code in ("404", "NoSuchKey") else 403},
        },
        operation,
    )


class FakeBody:
    """Mimics the aiobotocore StreamingBody interface used by the adapter."""

    def __init__(self, data: bytes):
        self._stream = io.BytesIO(data)

    async def read(self, amt: int | None = None) -> bytes:
        return self._stream.read() if amt is None else self._stream.read(amt)

    async def iter_chunks(self, chunk_size: int = 1024):
        while True:
            chunk = await self.read(chunk_size)
            if not chunk:
                break
            yield chunk


class FakeS3Client:
    """In-memory S3 client with the calls the adapter makes."""

    def __init__(self):
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str]] = []
        self.fail_keys: Set[str] = set()
        self.fail_operations: Set[str] = set()

    def _record(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if operation in self.fail_operations or key in self.fail_keys:
            raise _client_error("AccessDenied", operation)

    async def head_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        self._record("head_object", Key)
        if Key not in self.objects:
            raise _client_error("404", "HeadObject")
        return {"ContentLength": len(self.objects[Key]["Body"])}

    async def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        self._record("get_object", Key)
        if Key not in self.objects:
            raise _client_error("NoSuchKey", "GetObject")
        stored = self.objects[Key]
        return {
            "Body": FakeBody(stored["Body"]),
            "ContentType": stored.get("ContentType"),
            "ResponseMetadata": {
                "HTTPStatusCode": 200,
                "HTTPHeaders": {
                    "content-type": stored.get("ContentType", "binary/octet-stream"),
                    "content-length": str(len(stored["Body"])),
                    "cache-control": stored.get("CacheControl", "no-cache"),
                    "etag": '"fake-etag"',
                },
            },
        }

    async def put_object(self, **kwargs) -> Dict[str, Any]:
        self._record("put_object", kwargs["Key"])
        self.objects[kwargs["Key"]] = kwargs
        return {"ResponseMetadata": {"HTTPStatusCode": 200}}

    async def delete_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        self._record("delete_object", Key)
        self.objects.pop(Key, None)
        return {"ResponseMetadata": {"HTTPStatusCode": 204}}


class FakeClientContext:
    def __init__(self, client: FakeS3Client):
        self.client = client

    async def __aenter__(self) -> FakeS3Client:
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep GHOST_DO_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("GHOST_DO_"):
            monkeypatch.delenv(name)


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def spaces_config() -> Dict[str, Any]:
    return {
        "key": "access-key",
        "secret": "secret-key",
        "region": "fra1",
        "bucket": "media",
        "space_url": SPACE_URL,
        "subfolder": "/blog",
    }


@pytest.fixture
def make_storage(spaces_config, fake_s3):
    def factory(**overrides) -> SpacesStorage:
        resizer = overrides.pop("resizer", None)
        return SpacesStorage(
            {**spaces_config, **overrides},
            resizer=resizer,
            client_factory=lambda: FakeClientContext(fake_s3),
        )

    return factory


@pytest.fixture
def storage(make_storage) -> SpacesStorage:
    return make_storage()


def write_gradient_jpeg(path: Path, size: Tuple[int, int] = (1600, 1200)) -> bytes:
    gradient = Image.linear_gradient("L").resize(size)
    image = Image.merge("RGB", (gradient, gradient.transpose(Image.Transpose.FLIP_LEFT_RIGHT), gradient))
    image.save(path, format="JPEG", quality=95)
    return path.read_bytes()


@pytest.fixture
def jpeg_image(tmp_path) -> StorageImageSchema:
    path = tmp_path / "upload_jpeg"
    write_gradient_jpeg(path)
    return StorageImageSchema(name="My Photo.jpg", path=str(path), type="image/jpeg")


@pytest.fixture
def pdf_file(tmp_path) -> StorageImageSchema:
    path = tmp_path / "upload_pdf"
    path.write_bytes(b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n")
    return StorageImageSchema(
        name="Annual Report 2024.pdf", path=str(path), type="application/pdf"
    )
