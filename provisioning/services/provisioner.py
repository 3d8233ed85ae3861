# =============================================================================
# Worker Provisioning Service - Worker Provisioner
# =============================================================================
"""
Worker account provisioning.

Validates a createWorkerAccount call, resolves or creates the worker's
Firebase Auth user, and writes the worker and user profiles in one batch.
Every failure leaves as a CallableError carrying one of four codes.
"""

from typing import Any, List, Optional

import structlog
from pydantic import ValidationError

from ..config import get_settings
from ..models import (
    AuthContext,
    CallableErrorBody,
    DocumentWrite,
    ErrorCode,
    IdentityRecord,
    WorkerCreationRequest,
    WorkerProvisioningResult,
)
from .firestore import SERVER_TIMESTAMP, DocumentStore
from .identity import EmailAlreadyExistsError, IdentityService


# Configure structured logger
logger = structlog.get_logger(__name__)

CREATED_MESSAGE = "Worker account created successfully"
ALREADY_EXISTS_MESSAGE = "Worker account already exists"


class CallableError(Exception):
    """
    Error returned to the caller of a callable endpoint.
    
    Attributes:
        code: Machine-readable error code
        message: Human-readable description
    """
    
    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
    
    def to_body(self) -> CallableErrorBody:
        return CallableErrorBody(status=self.code, message=self.message)


class WorkerProvisioner:
    """
    Provisions worker accounts on behalf of authenticated customers.
    
    Calls are idempotent per email: a repeat call returns the stored
    worker profile instead of writing again. A user that exists in Auth
    without a worker profile (an earlier call failed between user creation
    and the batch write) is completed with its existing uid.
    
    Attributes:
        identity: Firebase Auth access
        store: Firestore access
        workers_collection: Collection for worker profiles
        users_collection: Collection for user profiles
    """
    
    def __init__(
        self,
        identity: IdentityService,
        store: DocumentStore,
        workers_collection: Optional[str] = None,
        users_collection: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        self.identity = identity
        self.store = store
        self.workers_collection = workers_collection or settings.workers_collection
        self.users_collection = users_collection or settings.users_collection
    
    async def handle(
        self,
        payload: Any,
        auth: Optional[AuthContext],
    ) -> WorkerProvisioningResult:
        """
        Provision a worker account.
        
        Checks run in order and the first failure wins: caller identity,
        payload shape, email/password, then worker/user data.
        
        Args:
            payload: Decoded callable "data" value
            auth: Verified caller, or None
            
        Returns:
            WorkerProvisioningResult: Created or existing worker account
            
        Raises:
            CallableError: UNAUTHENTICATED, INVALID_ARGUMENT, ALREADY_EXISTS
                or INTERNAL
        """
        if auth is None:
            raise CallableError(
                ErrorCode.UNAUTHENTICATED,
                "User must be authenticated to create worker accounts",
            )
        
        request = self._parse_request(payload)
        
        logger.info(
            "worker_provisioning_started",
            email=request.email,
            caller_uid=auth.uid,
        )
        
        try:
            return await self._provision(request)
        except EmailAlreadyExistsError as e:
            logger.warning(
                "worker_provisioning_failed",
                email=request.email,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise CallableError(
                ErrorCode.ALREADY_EXISTS,
                "A worker account with this email already exists",
            ) from e
        except Exception as e:
            logger.error(
                "worker_provisioning_failed",
                email=request.email,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise CallableError(
                ErrorCode.INTERNAL,
                f"Failed to create worker account: {e}",
            ) from e
    
    def _parse_request(self, payload: Any) -> WorkerCreationRequest:
        if not isinstance(payload, dict):
            raise CallableError(ErrorCode.INVALID_ARGUMENT, "Invalid request data")
        
        try:
            request = WorkerCreationRequest.model_validate(payload)
        except ValidationError as e:
            logger.warning("request_validation_failed", error=str(e))
            raise CallableError(
                ErrorCode.INVALID_ARGUMENT, "Invalid request data"
            ) from e
        
        if not request.email or not request.password:
            raise CallableError(
                ErrorCode.INVALID_ARGUMENT,
                "Email and password are required",
            )
        
        if request.worker_data is None or request.user_data is None:
            raise CallableError(
                ErrorCode.INVALID_ARGUMENT,
                "Worker data and user data are required",
            )
        
        return request
    
    async def _provision(
        self,
        request: WorkerCreationRequest,
    ) -> WorkerProvisioningResult:
        record: Optional[IdentityRecord] = None
        
        lookup = await self.identity.find_by_email(request.email)
        if lookup.is_found:
            record = lookup.record
            logger.info("identity_lookup_found", email=request.email, uid=record.uid)
            
            existing = await self.store.get_document(self.workers_collection, record.uid)
            if existing is not None:
                # First write wins; the stored profile is not reconciled
                return WorkerProvisioningResult(
                    worker_uid=record.uid,
                    worker_id=existing.get("worker_id"),
                    message=ALREADY_EXISTS_MESSAGE,
                    already_exists=True,
                )
            
            logger.warning("worker_profile_missing", uid=record.uid)
        
        if record is None:
            record = await self.identity.create_user(request.email, request.password)
            logger.info("identity_created", email=request.email, uid=record.uid)
        
        await self.store.batch_write(self.profile_writes(record.uid, request))
        logger.info("worker_documents_written", uid=record.uid)
        
        return WorkerProvisioningResult(
            worker_uid=record.uid,
            worker_id=request.worker_id,
            message=CREATED_MESSAGE,
            already_exists=False,
        )
    
    def profile_writes(
        self,
        uid: str,
        request: WorkerCreationRequest,
    ) -> List[DocumentWrite]:
        """
        Build the worker and user profile documents for one uid.
        
        Server-assigned fields override caller fields of the same name.
        """
        worker_fields = {
            **request.worker_data,
            "created_at": SERVER_TIMESTAMP,
            "last_active": SERVER_TIMESTAMP,
        }
        user_fields = {
            **request.user_data,
            "uid": uid,
            "createdAt": SERVER_TIMESTAMP,
            "lastLogin": SERVER_TIMESTAMP,
        }
        return [
            DocumentWrite(
                collection=self.workers_collection,
                document_id=uid,
                fields=worker_fields,
            ),
            DocumentWrite(
                collection=self.users_collection,
                document_id=uid,
                fields=user_fields,
            ),
        ]
