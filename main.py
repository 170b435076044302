import uvicorn

from app.core.config import settings
from app.main import app  # noqa: F401

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.node_env == "development",
        log_level=settings.log_level.lower(),
    )
