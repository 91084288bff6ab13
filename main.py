"""
Entry point for the pathwise service.

Run with:
    uvicorn src.api.main:app --reload --port 8100
    python main.py
"""
import uvicorn

from config import get_settings


def serve() -> None:
    """Run the normalization API with the configured host, port and log level."""
    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    serve()
