# =============================================================================
# Worker Provisioning Service - Services Package
# =============================================================================
"""Service layer for identity, storage and provisioning."""

from .firestore import DocumentStore, DocumentStoreError, get_document_store
from .identity import (
    EmailAlreadyExistsError,
    IdentityService,
    IdentityServiceError,
    get_identity_service,
)
from .provisioner import CallableError, WorkerProvisioner

__all__ = [
    "CallableError",
    "DocumentStore",
    "DocumentStoreError",
    "EmailAlreadyExistsError",
    "IdentityService",
    "IdentityServiceError",
    "WorkerProvisioner",
    "get_document_store",
    "get_identity_service",
]
