import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from carpool.auth.router import router as auth_router
from carpool.config import Settings
from carpool.database.base import Base, build_engine, build_session_factory
from carpool.errors import CarpoolError
from carpool.routes import reviews, rides

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=app.state.engine)
    logger.info("Carpool API started")
    try:
        yield
    finally:
        app.state.engine.dispose()
        logger.info("Carpool API stopped")


def register_exception_handlers(app: FastAPI):

    @app.exception_handler(CarpoolError)
    async def carpool_error_handler(request: Request, exc: CarpoolError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid input"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": message, "errors": jsonable_encoder(errors)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Something went wrong!", "error": str(exc)}
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(title="Carpool", lifespan=lifespan, debug=settings.DEBUG)

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.SessionLocal = build_session_factory(app.state.engine)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth_router, prefix=settings.API_PREFIX)
    app.include_router(rides.router, prefix=settings.API_PREFIX)
    app.include_router(reviews.router, prefix=settings.API_PREFIX)

    @app.get(f"{settings.API_PREFIX}/health")
    def health_check():
        return {"status": "OK", "message": "Server is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("carpool.main:app", host="0.0.0.0", port=8000)
