# backend/main.py
# Entry point: uvicorn backend.main:app
import uvicorn

from backend.app.core.config import settings
from backend.app.main import app  # noqa: F401

if __name__ == "__main__":
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
        log_level=settings.LOG_LEVEL.lower(),
    )
