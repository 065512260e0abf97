import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.di.container import ApplicationContainer as DependencyContainer, build_container
from api.shared.dtos import ErrorResponse, HealthCheckResponse
from core.logging_config import configure_logging
from core.settings import SETTINGS, Settings

logger = logging.getLogger("support_chat")


class CustomFastAPI(FastAPI):
    container: DependencyContainer
    settings: Settings


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()

    try:
        logger.info(
            f"Initializing {_app.settings.DATABASE.STORE_BACKEND} conversation store..."
        )
        db_start = time.time()
        db_resource = _app.container.infrastructure.database()
        await db_resource.init()
        await _app.container.services.conversation_store().initialize()
        logger.info(f"✅ Conversation store ready in {time.time() - db_start:.2f}s")

        if not _app.settings.OPENAI.OPENAI_API_KEY.get_secret_value():
            logger.warning("⚠️  OPENAI_API_KEY not set; replies will use fallback text")

        logger.info(
            f"✅ Application startup completed in {time.time() - start_time:.2f}s"
        )
    except Exception as e:
        logger.exception(f"❌ Failed to initialize application: {str(e)}")
        raise

    yield

    try:
        await _app.container.infrastructure.openai().shutdown()
        await _app.container.infrastructure.database().shutdown()
        logger.info("Application shutdown complete")
    except Exception:
        logger.exception("Error during shutdown")


def create_fastapi_app(
    settings: Optional[Settings] = None,
    container: Optional[DependencyContainer] = None,
) -> CustomFastAPI:
    settings = settings or SETTINGS
    configure_logging(settings.APP)

    _app = CustomFastAPI(
        title="Support Chat API",
        description="TechStore customer-support chat: conversation history and AI replies",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.settings = settings
    _app.container = container or build_container(settings)
    _app.container.wire()

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.APP.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from api.features.chat.router import router as chat_router

    _app.include_router(chat_router, prefix="/api/chat", tags=["Chat"])

    @_app.get("/")
    async def root():
        return {"message": "Support Chat API is running", "status": "ok"}

    @_app.get("/api/health", response_model=HealthCheckResponse, response_model_exclude_none=True)
    async def health():
        return HealthCheckResponse(status="healthy", environment=settings.APP.ENVIRONMENT)

    @_app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "Validation Error", "detail": str(exc), "status_code": 422},
        )

    @_app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        detail = str(exc) if settings.APP.ENVIRONMENT == "local" else "Something went wrong"
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", message=detail).model_dump(),
        )

    return _app


app = create_fastapi_app()


def run() -> None:
    import uvicorn

    uvicorn.run("api.main:app", host=SETTINGS.APP.HOST, port=SETTINGS.APP.PORT)
