# =============================================================================
# Worker Provisioning Service - Pydantic Schemas
# =============================================================================
"""
Request and response models for the worker provisioning callable.

Wire names follow the callable contract (camelCase); Python attributes
stay snake_case and are mapped with field aliases.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """Callable error codes surfaced to clients."""
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INTERNAL = "INTERNAL"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    ErrorCode.UNAUTHENTICATED: 401,
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.INTERNAL: 500,
}


class AuthContext(BaseModel):
    """
    Identity of the calling customer, taken from a verified ID token.
    
    Attributes:
        uid: Caller's Firebase uid
        token: Decoded ID token claims
    """
    
    uid: str
    token: Dict[str, Any] = Field(default_factory=dict)


class WorkerCreationRequest(BaseModel):
    """
    Payload of a createWorkerAccount call.
    
    Every field is optional at parse time so that presence checks can run
    in a fixed order inside the provisioner.
    
    Example:
        {
            "email": "a@b.com",
            "password": "pw123456",
            "workerData": {"worker_id": "W1"},
            "userData": {"name": "A"}
        }
    """
    
    model_config = ConfigDict(populate_by_name=True, extra="ignore")
    
    email: Optional[str] = Field(default=None, description="Worker login email")
    password: Optional[str] = Field(default=None, description="Initial password")
    worker_data: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="workerData",
        description="Worker profile fields; expected to contain worker_id",
    )
    user_data: Optional[Dict[str, Any]] = Field(
        default=None,
        alias="userData",
        description="User profile fields",
    )
    
    @property
    def worker_id(self) -> Any:
        """worker_id from the submitted worker data, if any."""
        return (self.worker_data or {}).get("worker_id")


class IdentityRecord(BaseModel):
    """A Firebase Auth user as seen by this service."""
    
    uid: str
    email: Optional[str] = None


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


class IdentityLookup(BaseModel):
    """
    Outcome of looking a user up by email.
    
    Provider failures other than "no such user" are raised, never
    reported as NOT_FOUND.
    """
    
    status: LookupStatus
    record: Optional[IdentityRecord] = None
    
    @classmethod
    def found(cls, record: IdentityRecord) -> "IdentityLookup":
        return cls(status=LookupStatus.FOUND, record=record)
    
    @classmethod
    def not_found(cls) -> "IdentityLookup":
        return cls(status=LookupStatus.NOT_FOUND)
    
    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND


class DocumentWrite(BaseModel):
    """
    A single document set inside an atomic batch.
    
    Attributes:
        collection: Top-level collection name
        document_id: Document ID within the collection
        fields: Full document body (may contain Firestore sentinels)
    """
    
    collection: str
    document_id: str
    fields: Dict[str, Any]
    
    @property
    def path(self) -> str:
        return f"{self.collection}/{self.document_id}"


class WorkerProvisioningResult(BaseModel):
    """
    Successful createWorkerAccount result.
    
    Attributes:
        success: Always True
        worker_uid: uid of the worker's Firebase Auth user
        worker_id: worker_id of the worker profile
        message: Human-readable status message
        already_exists: True when an existing worker profile was returned
    """
    
    model_config = ConfigDict(populate_by_name=True)
    
    success: bool = Field(default=True)
    worker_uid: str = Field(..., alias="workerUid")
    worker_id: Optional[Any] = Field(default=None, alias="workerId")
    message: str = Field(..., description="Human-readable status message")
    already_exists: bool = Field(..., alias="alreadyExists")
    
    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys for the callable response."""
        return self.model_dump(mode="json", by_alias=True)


class CallableErrorBody(BaseModel):
    """Error envelope content returned to callable clients."""
    
    status: ErrorCode
    message: str


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.
    
    Attributes:
        status: Service health status
        service: Service name
        version: Service version
        timestamp: Current server time
    """
    
    status: str = Field(default="healthy", description="Health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Current timestamp",
    )
