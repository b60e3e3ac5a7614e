"""API server entry point."""

import uvicorn

from src.api.app import create_app
from src.config.settings import load_settings


def main() -> None:
    """Start the API server."""
    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
