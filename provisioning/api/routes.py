"""
Worker Provisioning Service - Route Handlers

Exposes createWorkerAccount over the Firebase callable protocol:
requests carry {"data": ...}, replies carry {"result": ...} or
{"error": {"status": ..., "message": ...}}.
"""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic_core import PydanticSerializationError

from ..config import get_settings
from ..models import AuthContext, ErrorCode, HealthResponse
from ..services import (
    CallableError,
    IdentityServiceError,
    WorkerProvisioner,
    get_document_store,
    get_identity_service,
)


logger = structlog.get_logger(__name__)
router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check for load balancers."""
    settings = get_settings()
    return HealthResponse(service=settings.service_name, version="1.0.0")


async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthContext]:
    """Resolve the caller from a Firebase ID token, or None."""
    if credentials is None:
        return None
    try:
        return await get_identity_service().verify_caller(credentials.credentials)
    except IdentityServiceError as e:
        raise CallableError(ErrorCode.INTERNAL, str(e)) from e


@router.post("/createWorkerAccount", tags=["Provisioning"])
async def create_worker_account(
    request: Request,
    auth: Optional[AuthContext] = Depends(get_auth_context),
) -> JSONResponse:
    """
    Create (or return the existing) worker account for an email.
    
    Steps:
    1. Verify the caller's ID token
    2. Validate email, password, workerData and userData
    3. Find or create the Firebase Auth user
    4. Write workers/{uid} and users/{uid} in one batch
    """
    payload = await _read_callable_data(request)
    
    provisioner = WorkerProvisioner(
        identity=get_identity_service(),
        store=get_document_store(),
    )
    result = await provisioner.handle(payload, auth)
    
    try:
        body = {"result": result.to_wire()}
    except PydanticSerializationError as e:
        logger.error("result_serialization_failed", uid=result.worker_uid, error=str(e))
        raise CallableError(
            ErrorCode.INTERNAL,
            f"Failed to create worker account: {e}",
        ) from e
    
    return JSONResponse(content=body)


async def _read_callable_data(request: Request) -> Any:
    """Extract the "data" member of a callable request body."""
    try:
        body = await request.json()
    except Exception as e:
        logger.warning("invalid_json_body", error=str(e))
        return None
    
    if not isinstance(body, dict):
        return None
    return body.get("data")


async def callable_error_handler(request: Request, exc: CallableError) -> JSONResponse:
    """Render a CallableError in the callable error envelope."""
    return JSONResponse(
        status_code=exc.code.http_status,
        content={"error": exc.to_body().model_dump(mode="json")},
    )
