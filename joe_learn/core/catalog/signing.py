"""
Upload signing for direct-to-storage uploads.

Clients never send file bytes through this API. Instead they ask for a
signature, then upload straight to the storage provider with it. The
provider recomputes the signature from the same parameters and our
secret, and rejects the upload if they don't match.

This module only decides *what* gets signed. The signing primitive
itself belongs to the storage provider and is reached through the
UploadSigner protocol, so the secret never leaves the storage client.
"""

import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol


# Parameters the provider leaves out when it verifies a signature.
EXCLUDED_SIGNATURE_PARAMS = frozenset({
    "api_key",
    "api_secret",
    "cloud_name",
    "file",
    "resource_type",
    "signature",
})


class UploadSigner(Protocol):
    """Anything that can sign a set of upload parameters."""

    def sign_upload(self, params: Mapping[str, Any]) -> str:
        """Return the provider signature for ``params``."""
        ...

    @property
    def api_key(self) -> str: ...

    @property
    def cloud_name(self) -> str: ...


class SigningError(Exception):
    """Raised when an upload signature can't be produced."""
    pass


@dataclass(frozen=True)
class UploadSignature:
    """Everything a client needs to finish a direct upload."""
    signature: str
    timestamp: int
    api_key: str
    cloud_name: str


def current_timestamp() -> int:
    """Current Unix time, rounded to whole seconds."""
    return round(time.time())


def build_params_to_sign(timestamp: int, extra_params: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge client-supplied fields with the server timestamp.

    The server timestamp always wins over a client ``timestamp`` so the
    returned timestamp is the one that was actually signed.
    """
    params = {
        key: value
        for key, value in extra_params.items()
        if key not in EXCLUDED_SIGNATURE_PARAMS
    }
    params["timestamp"] = timestamp
    return params


def sign_upload_request(
    signer: UploadSigner,
    extra_params: Mapping[str, Any],
    timestamp: Optional[int] = None,
) -> UploadSignature:
    """
    Produce a signature for a direct upload.

    Raises SigningError if the signer fails for any reason; callers never
    get a partial result.
    """
    if timestamp is None:
        timestamp = current_timestamp()

    params = build_params_to_sign(timestamp, extra_params)

    try:
        signature = signer.sign_upload(params)
    except Exception as e:
        raise SigningError(f"Could not sign upload parameters: {e}") from e

    if not signature:
        raise SigningError("Signer returned an empty signature")

    return UploadSignature(
        signature=signature,
        timestamp=timestamp,
        api_key=signer.api_key,
        cloud_name=signer.cloud_name,
    )
