"""Run the worker provisioning service with uvicorn."""

import uvicorn

from .config import get_settings


def main() -> None:
    """Serve the application on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "provisioning.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
