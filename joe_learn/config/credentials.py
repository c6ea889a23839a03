"""
Provider credential loading.

The Firebase service account key is a JSON document kept next to the
server (``serviceAccountKey.json`` by default). It is read exactly once
at startup; if it can't be read the process must not start.

Each failure mode gets its own exception so the startup log can tell the
operator what to fix.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class StartupError(Exception):
    """Raised when the process can't start serving requests."""
    pass


class ConfigurationError(StartupError):
    """Raised when required settings are missing."""
    pass


class CredentialsNotFoundError(StartupError):
    """Raised when the service account key file doesn't exist."""
    pass


class InvalidCredentialsError(StartupError):
    """Raised when the service account key file isn't a JSON object."""
    pass


def load_service_account(path: str) -> dict[str, Any]:
    """
    Load a Firebase service account key from ``path``.

    Relative paths resolve against the current working directory.

    Raises:
        CredentialsNotFoundError: the file doesn't exist
        InvalidCredentialsError: the file isn't valid JSON, or isn't an object
        StartupError: anything else went wrong reading it
    """
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        resolved = resolved.resolve()

    if not resolved.is_file():
        raise CredentialsNotFoundError(
            f"The service account key file `{path}` was not found (resolved: {resolved}). "
            "Create it and paste your Firebase service account key into it."
        )

    try:
        with open(resolved, encoding="utf-8") as f:
            key_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidCredentialsError(
            f"The service account key file `{path}` contains invalid JSON: {e}. "
            "Copy the entire, unmodified content of your downloaded Firebase key file."
        ) from e
    except OSError as e:
        raise StartupError(
            f"An unexpected error occurred reading `{path}`: {e}"
        ) from e

    if not isinstance(key_dict, dict):
        raise InvalidCredentialsError(
            f"The service account key file `{path}` must contain a JSON object."
        )

    logger.debug(
        "Loaded service account key",
        extra={"path": str(resolved), "project_id": key_dict.get("project_id")}
    )

    return key_dict
