import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import models for table creation
from app.core import models  # noqa: F401
from app.core.config import settings
from app.core.logging import setup_logging
from app.domains.auth.dependencies import get_current_user
from app.domains.auth.router import router as auth_router
from app.domains.listings.router import router as listing_router
from app.domains.nfts.router import router as nft_router
from app.domains.toolbox.router import router as toolbox_router
from app.domains.transactions.router import router as feed_router
from app.domains.users.router import router as profile_router
from app.shared.database.connection import get_db, init_db
from app.shared.utils.response import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    init_db()
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.node_env)
    yield


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    body = ErrorResponse(message=message, **extra).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def register_exception_handlers(application: FastAPI) -> None:
    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        response = _error(exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _error(
            status.HTTP_400_BAD_REQUEST, "Invalid payload", issues=jsonable_encoder(exc.errors())
        )

    @application.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        # Detail stays in the server log
        logger.exception("Unhandled request error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app() -> FastAPI:
    setup_logging()

    application = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    # Public routers
    application.include_router(auth_router, prefix="/api")

    # Everything else requires a bearer token
    protected = [Depends(get_current_user)]
    for router in (profile_router, nft_router, listing_router, toolbox_router, feed_router):
        application.include_router(router, prefix="/api", dependencies=protected)

    @application.get("/")
    async def root() -> dict[str, str]:
        return {"name": "echelon-backend", "status": "operational"}

    @application.get("/api/health")
    def health_check(db: Session = Depends(get_db)) -> dict[str, str]:
        try:
            # Test database connection
            db.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "environment": settings.node_env,
                "database": "connected",
            }
        except SQLAlchemyError as e:
            logger.error("Health check failed: %s", e)
            return {
                "status": "unhealthy",
                "environment": settings.node_env,
                "database": "disconnected",
            }

    return application


app = create_app()
