# =============================================================================
# Worker Provisioning Service - Firebase Identity Service
# =============================================================================
"""
Firebase Authentication access via the Admin SDK.

Wraps the synchronous firebase_admin.auth API in an async-friendly
interface and translates SDK errors into service exceptions.
"""

import asyncio
from functools import lru_cache
from typing import Optional

import firebase_admin
import structlog
from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from ..config import get_settings
from ..models import AuthContext, IdentityLookup, IdentityRecord


# Configure structured logger
logger = structlog.get_logger(__name__)


class IdentityService:
    """
    Async-compatible Firebase Auth client.
    
    Owns one named firebase_admin App for the life of the process. The
    App is created on first use and released by close().
    
    Attributes:
        project_id: Firebase project identifier
        app_name: Name of the firebase_admin App
        _app: Underlying firebase_admin App
    """
    
    def __init__(
        self,
        project_id: str,
        app_name: str,
        app: Optional[firebase_admin.App] = None,
    ) -> None:
        """
        Initialize the identity service.
        
        Args:
            project_id: Firebase project identifier
            app_name: Name to register the firebase_admin App under
            app: Pre-built App (created lazily if None)
        """
        self.project_id = project_id
        self.app_name = app_name
        self._app: Optional[firebase_admin.App] = app
        
        logger.info(
            "identity_service_initialized",
            project_id=project_id,
            app_name=app_name,
        )
    
    def _get_app(self) -> firebase_admin.App:
        """
        Lazily initialize the firebase_admin App.
        
        Uses Application Default Credentials.
        
        Returns:
            firebase_admin.App: Initialized App
        """
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(self.app_name)
            except ValueError:
                self._app = firebase_admin.initialize_app(
                    options={"projectId": self.project_id},
                    name=self.app_name,
                )
        return self._app
    
    async def _run(self, func, *args, **kwargs):
        """Run a blocking Admin SDK call in the default thread pool."""
        app = self._get_app()
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None,
            lambda: func(*args, app=app, **kwargs),
        )
    
    async def find_by_email(self, email: str) -> IdentityLookup:
        """
        Look up a user by email.
        
        Args:
            email: Email address to resolve
            
        Returns:
            IdentityLookup: FOUND with the record, or NOT_FOUND
            
        Raises:
            IdentityServiceError: On any provider failure other than
                "user not found"
        """
        try:
            user = await self._run(auth.get_user_by_email, email)
        except auth.UserNotFoundError:
            return IdentityLookup.not_found()
        except Exception as e:
            logger.error(
                "identity_lookup_failed",
                email=email,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise IdentityServiceError(f"Failed to look up user: {e}") from e
        
        return IdentityLookup.found(IdentityRecord(uid=user.uid, email=user.email))
    
    async def create_user(self, email: str, password: str) -> IdentityRecord:
        """
        Create an enabled, unverified user.
        
        Args:
            email: Login email
            password: Initial password
            
        Returns:
            IdentityRecord: The newly created user
            
        Raises:
            EmailAlreadyExistsError: If the email is already registered
            IdentityServiceError: On any other provider failure
        """
        try:
            user = await self._run(
                auth.create_user,
                email=email,
                password=password,
                email_verified=False,
                disabled=False,
            )
        except auth.EmailAlreadyExistsError as e:
            logger.warning("identity_email_already_exists", email=email)
            raise EmailAlreadyExistsError(
                f"Email already registered: {email}"
            ) from e
        except Exception as e:
            logger.error(
                "identity_create_failed",
                email=email,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise IdentityServiceError(str(e)) from e
        
        return IdentityRecord(uid=user.uid, email=user.email)
    
    async def verify_caller(self, id_token: Optional[str]) -> Optional[AuthContext]:
        """
        Verify a caller's Firebase ID token.
        
        Args:
            id_token: Raw ID token from the Authorization header
            
        Returns:
            Optional[AuthContext]: Caller identity, or None if the token is
                missing, invalid, expired or revoked
            
        Raises:
            IdentityServiceError: If Google's signing certificates cannot
                be fetched
        """
        if not id_token:
            return None
        
        try:
            claims = await self._run(auth.verify_id_token, id_token, check_revoked=True)
        except auth.CertificateFetchError as e:
            logger.error(
                "id_token_certificate_fetch_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise IdentityServiceError(f"Failed to verify ID token: {e}") from e
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning(
                "id_token_rejected",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        
        return AuthContext(uid=claims["uid"], token=claims)
    
    def close(self) -> None:
        """Delete the firebase_admin App, if one was created."""
        if self._app is not None:
            firebase_admin.delete_app(self._app)
            self._app = None


class IdentityServiceError(Exception):
    """Custom exception for Firebase Auth failures."""
    pass


class EmailAlreadyExistsError(IdentityServiceError):
    """Raised when creating a user whose email is already registered."""
    pass


@lru_cache
def get_identity_service() -> IdentityService:
    """
    Get cached identity service instance.
    
    Returns:
        IdentityService: Configured identity service
    """
    settings = get_settings()
    return IdentityService(
        project_id=settings.gcp_project_id,
        app_name=settings.firebase_app_name,
    )
