# =============================================================================
# Worker Provisioning Service - Configuration
# =============================================================================
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with sensible defaults
for local development. Emulator hosts (FIREBASE_AUTH_EMULATOR_HOST,
FIRESTORE_EMULATOR_HOST) are read directly by the Google SDKs.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Attributes:
        gcp_project_id: Firebase / Google Cloud project identifier
        gcp_region: GCP region the function is deployed to
        workers_collection: Firestore collection holding worker profiles
        users_collection: Firestore collection holding user profiles
        firebase_app_name: Name of the process-wide firebase_admin App
        host: Interface uvicorn binds to
        port: Port uvicorn listens on (Cloud Run sets PORT)
        environment: Current environment (development/staging/production)
        log_level: Logging verbosity level
        service_name: Name of this service for logging/tracing
    """
    
    # Google Cloud Configuration
    gcp_project_id: str = "fixmate-dev"
    gcp_region: str = "us-central1"
    
    # Firestore Configuration
    workers_collection: str = "workers"
    users_collection: str = "users"
    
    # Firebase Configuration
    firebase_app_name: str = "worker-provisioning"
    
    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8080
    
    # Application Configuration
    environment: str = "development"
    log_level: str = "INFO"
    service_name: str = "worker-provisioning"
    
    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.
    
    Returns:
        Settings: Application configuration instance
    """
    return Settings()
