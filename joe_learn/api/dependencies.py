"""
FastAPI dependency injection.

External clients (Firestore, Cloudinary) are built exactly once at
startup into an AppServices container that lives on ``app.state``.
Dependencies hand pieces of it to route handlers. Using dependency
injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Tests build an AppServices with in-memory fakes and pass it to create_app
- There are no module-level client singletons
"""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from ..config.credentials import ConfigurationError, load_service_account
from ..config.settings import Settings
from ..infrastructure.firestore.client import (
    FirestoreClient,
    FirestoreConfig,
    create_metadata_store,
)
from ..infrastructure.firestore.repositories import AssessmentRepository, VideoRepository
from ..infrastructure.storage.client import StorageClient, StorageConfig, create_storage_client

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Long-lived clients shared by every request."""
    settings: Settings
    metadata_store: FirestoreClient
    storage: StorageClient


def build_services(settings: Settings) -> AppServices:
    """
    Build every external client the API needs.

    Called once at startup. Raises a StartupError subclass if settings
    or credentials are missing or malformed; the process should not
    serve requests in that case.
    """
    missing_fields = settings.validate_required_fields()
    if missing_fields:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing_fields)}"
        )

    if settings.firestore_mock_mode:
        metadata_store = create_metadata_store(mock_mode=True)
    else:
        service_account = load_service_account(settings.firebase_service_account_path)
        metadata_store = create_metadata_store(
            FirestoreConfig(
                service_account=service_account,
                app_name=settings.firebase_app_name,
            )
        )

    # Mock mode still signs, so it gets placeholder credentials if none are set
    mock = settings.storage_mock_mode
    storage_config = StorageConfig(
        cloud_name=settings.cloudinary_cloud_name or ("mock-cloud" if mock else ""),
        api_key=settings.cloudinary_api_key or ("mock-api-key" if mock else ""),
        api_secret=settings.cloudinary_api_secret or ("mock-api-secret" if mock else ""),
        video_folder=settings.video_folder,
        assessment_folder=settings.assessment_folder,
    )
    storage = create_storage_client(config=storage_config, mock_mode=mock)

    logger.info(
        "Services ready",
        extra={
            "mock_mode": {
                "firestore": settings.firestore_mock_mode,
                "storage": settings.storage_mock_mode,
            }
        }
    )

    return AppServices(settings=settings, metadata_store=metadata_store, storage=storage)


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_services(request: Request) -> AppServices:
    """The AppServices built at startup."""
    return request.app.state.services


def get_storage_client(services: Annotated[AppServices, Depends(get_services)]) -> StorageClient:
    return services.storage


def get_video_repository(
    services: Annotated[AppServices, Depends(get_services)],
) -> VideoRepository:
    """
    Provide VideoRepository over the shared Firestore client.

    Repositories are cheap wrappers, so one is created per request.
    """
    return VideoRepository(services.metadata_store)


def get_assessment_repository(
    services: Annotated[AppServices, Depends(get_services)],
) -> AssessmentRepository:
    return AssessmentRepository(services.metadata_store)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
VideoRepositoryDep = Annotated[VideoRepository, Depends(get_video_repository)]
AssessmentRepositoryDep = Annotated[AssessmentRepository, Depends(get_assessment_repository)]
