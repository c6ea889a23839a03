"""
Object storage client for videos and assessment files.

Files live in Cloudinary. The API mostly stays out of the data path:
clients upload directly with a signature we hand out, and we only talk
to Cloudinary ourselves to sign, to delete, and for the raw-file upload
path that forwards a multipart upload unmodified.

Credentials are passed to the SDK on every call instead of through
``cloudinary.config()``, so nothing here depends on process-wide SDK state.
SDK calls are blocking and run in a worker thread.

Mock mode keeps uploaded files in memory, enabling API testing without
a Cloudinary account.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Mapping, Optional, Protocol
from uuid import uuid4

import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class UnsupportedFormatError(StorageError):
    """Raised when a file's format isn't allowed for its destination."""
    pass


class AssetKind(Enum):
    """What kind of file is being stored. Decides folder and resource type."""
    VIDEO = "video"
    ASSESSMENT = "assessment"


@dataclass(frozen=True)
class UploadTarget:
    """Where (and as what) a kind of asset is stored."""
    folder: str
    resource_type: str
    allowed_formats: tuple[str, ...]

    def accepts(self, filename: str) -> bool:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        return ext in self.allowed_formats


@dataclass(frozen=True)
class UploadedAsset:
    """Result of a raw-file upload."""
    url: str
    public_id: str


@dataclass
class StorageConfig:
    """
    Configuration for Cloudinary storage.

    ``cloud_name`` and ``api_key`` are public and go back to clients
    with each signature. ``api_secret`` is only used to sign.
    """
    cloud_name: str
    api_key: str
    api_secret: str
    video_folder: str = "joe-learn-videos"
    assessment_folder: str = "joe-learn-assessments"

    def target_for(self, kind: AssetKind) -> UploadTarget:
        if kind is AssetKind.VIDEO:
            return UploadTarget(
                folder=self.video_folder,
                resource_type="video",
                allowed_formats=("mp4", "mov", "avi"),
            )
        # PDFs are stored as raw files
        return UploadTarget(
            folder=self.assessment_folder,
            resource_type="raw",
            allowed_formats=("pdf",),
        )

    @property
    def credentials(self) -> dict[str, str]:
        """Per-call credential options for the Cloudinary SDK."""
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }


class StorageClient(Protocol):
    """
    Protocol for object storage operations.

    Using a protocol means tests can provide mocks and we can
    swap storage backends without changing dependent code.
    """

    @property
    def api_key(self) -> str: ...

    @property
    def cloud_name(self) -> str: ...

    def sign_upload(self, params: Mapping[str, Any]) -> str:
        """Sign direct-upload parameters with the account secret."""
        ...

    async def destroy(self, public_id: str, resource_type: str) -> str:
        """Delete a stored object. Returns the provider's result string."""
        ...

    async def upload(self, file: BinaryIO, filename: str, kind: AssetKind) -> UploadedAsset:
        """Forward a file to storage unmodified."""
        ...


class CloudinaryStorageClient:
    """
    Cloudinary storage client.

    All I/O methods are async to match the Protocol even though the
    Cloudinary SDK is synchronous.
    """

    def __init__(self, config: StorageConfig) -> None:
        self._config = config

        logger.info(
            "Initialized Cloudinary storage client",
            extra={"cloud_name": config.cloud_name}
        )

    @property
    def api_key(self) -> str:
        return self._config.api_key

    @property
    def cloud_name(self) -> str:
        return self._config.cloud_name

    def sign_upload(self, params: Mapping[str, Any]) -> str:
        """
        Sign upload parameters the way Cloudinary verifies them.

        Sorted ``key=value`` pairs joined with ``&``, secret appended,
        hashed. The secret itself is never one of the pairs.
        """
        return cloudinary.utils.api_sign_request(dict(params), self._config.api_secret)

    async def destroy(self, public_id: str, resource_type: str) -> str:
        """
        Delete a stored object by public_id.

        Cloudinary answers ``not found`` rather than failing when the
        object is already gone; that's returned, not raised.
        """
        try:
            response = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                resource_type=resource_type,
                **self._config.credentials,
            )
        except CloudinaryError as e:
            logger.error(
                "Failed to destroy asset",
                extra={"public_id": public_id, "resource_type": resource_type, "error": str(e)}
            )
            raise StorageError(f"Destroy failed: {e}") from e

        result = response.get("result", "")

        logger.info(
            "Destroyed asset",
            extra={"public_id": public_id, "resource_type": resource_type, "result": result}
        )

        return result

    async def upload(self, file: BinaryIO, filename: str, kind: AssetKind) -> UploadedAsset:
        """
        Upload a file into the folder configured for its kind.

        The file is streamed to Cloudinary as-is; Cloudinary assigns the
        public_id.
        """
        target = self._config.target_for(kind)
        if not target.accepts(filename):
            raise UnsupportedFormatError(
                f"{filename!r} is not one of: {', '.join(target.allowed_formats)}"
            )

        try:
            response = await asyncio.to_thread(
                cloudinary.uploader.upload,
                file,
                folder=target.folder,
                resource_type=target.resource_type,
                allowed_formats=list(target.allowed_formats),
                **self._config.credentials,
            )
        except CloudinaryError as e:
            logger.error(
                "Failed to upload asset",
                extra={"upload_name": filename, "kind": kind.value, "error": str(e)}
            )
            raise StorageError(f"Upload failed: {e}") from e

        asset = UploadedAsset(url=response["secure_url"], public_id=response["public_id"])

        logger.info(
            "Uploaded asset",
            extra={"public_id": asset.public_id, "kind": kind.value}
        )

        return asset


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

@dataclass
class StoredObject:
    data: bytes
    resource_type: str


class MockStorageClient:
    """
    In-memory storage for local development.

    Uploaded files are kept in a dictionary keyed by public_id and "URLs"
    are mock URIs. Signing uses the real Cloudinary algorithm, so
    signatures from mock mode are still verifiable.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self, config: Optional[StorageConfig] = None) -> None:
        self._config = config or StorageConfig(
            cloud_name="mock-cloud",
            api_key="mock-api-key",
            api_secret="mock-api-secret",
        )
        self.objects: dict[str, StoredObject] = {}
        # (public_id, resource_type) for every destroy call, in order
        self.destroy_calls: list[tuple[str, str]] = []
        logger.info("Initialized mock storage client (in-memory)")

    @property
    def api_key(self) -> str:
        return self._config.api_key

    @property
    def cloud_name(self) -> str:
        return self._config.cloud_name

    def sign_upload(self, params: Mapping[str, Any]) -> str:
        return cloudinary.utils.api_sign_request(dict(params), self._config.api_secret)

    async def destroy(self, public_id: str, resource_type: str) -> str:
        """Remove an object from memory."""
        self.destroy_calls.append((public_id, resource_type))

        if public_id not in self.objects:
            return "not found"

        del self.objects[public_id]

        logger.debug(
            "Deleted object from mock storage",
            extra={"public_id": public_id}
        )

        return "ok"

    async def upload(self, file: BinaryIO, filename: str, kind: AssetKind) -> UploadedAsset:
        """Store file bytes in memory."""
        target = self._config.target_for(kind)
        if not target.accepts(filename):
            raise UnsupportedFormatError(
                f"{filename!r} is not one of: {', '.join(target.allowed_formats)}"
            )

        public_id = f"{target.folder}/{uuid4().hex}"
        data = file.read()
        self.objects[public_id] = StoredObject(data=data, resource_type=target.resource_type)

        logger.debug(
            "Stored object in mock storage",
            extra={"public_id": public_id, "size_bytes": len(data)}
        )

        return UploadedAsset(
            url=f"mock://{self.cloud_name}/{target.resource_type}/{public_id}",
            public_id=public_id,
        )


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (Cloudinary or Mock)
    """
    if mock_mode:
        return MockStorageClient(config)

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return CloudinaryStorageClient(config)
