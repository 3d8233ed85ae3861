# =============================================================================
# Worker Provisioning Service - Models Package
# =============================================================================
"""Pydantic models for request/response validation."""

from .schemas import (
    AuthContext,
    CallableErrorBody,
    DocumentWrite,
    ErrorCode,
    HealthResponse,
    IdentityLookup,
    IdentityRecord,
    LookupStatus,
    WorkerCreationRequest,
    WorkerProvisioningResult,
)

__all__ = [
    "AuthContext",
    "CallableErrorBody",
    "DocumentWrite",
    "ErrorCode",
    "HealthResponse",
    "IdentityLookup",
    "IdentityRecord",
    "LookupStatus",
    "WorkerCreationRequest",
    "WorkerProvisioningResult",
]
