import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.activities import router as activities_router
from api.creators import router as creators_router
from api.discovery import router as discovery_router
from api.personas import router as personas_router
from api.posts import router as posts_router
from api.profile import router as profile_router
from api.streams import router as streams_router
from api.tips import router as tips_router
from api.tokens import router as tokens_router
from api.users import router as users_router
from config import Settings
from services.ai_chat import AiChatClient
from services.payments import PaymentVerifier
from services.solana import SolanaClient
from storage import Storage, StorageError, create_storage

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def _describe_errors(errors) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in errors
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Routes may pass {"error", "details"} as the detail; plain strings are wrapped
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def validation_exception_handler(request: Request, exc):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request data", "details": _describe_errors(exc.errors())},
    )


async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    ai_client: Optional[AiChatClient] = None,
    solana_client: Optional[SolanaClient] = None,
) -> FastAPI:
    """
    Build the API. Collaborators default to what the environment configures;
    tests pass their own.
    """
    settings = settings or Settings.from_env()
    storage = storage or create_storage(settings)
    ai_client = ai_client or AiChatClient.from_settings(settings)
    solana_client = solana_client or SolanaClient(settings.solana_rpc_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle - startup and shutdown.
        """
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

        logger.info("Starting GoonHub API with %s storage", settings.storage_backend.value)
        await storage.initialize()
        if not ai_client.configured:
            logger.warning("AI provider key not set; persona chat replies are disabled")
        if not settings.verify_payments:
            logger.warning("VERIFY_PAYMENTS is off; payments are accepted unverified")

        yield

        logger.info("Shutting down GoonHub API...")
        await storage.close()

    app = FastAPI(
        title="GoonHub API",
        description="Creator content, tipping, AI persona chat and live streaming",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.ai_client = ai_client
    app.state.solana_client = solana_client
    app.state.payment_verifier = PaymentVerifier(solana_client, settings.verify_payments)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)

    # Include routers
    app.include_router(users_router, prefix="/api/users", tags=["Users"])
    app.include_router(posts_router, prefix="/api", tags=["Posts"])
    app.include_router(creators_router, prefix="/api/creators", tags=["Creators"])
    app.include_router(tokens_router, prefix="/api/tokens", tags=["Tokens"])
    app.include_router(tips_router, prefix="/api/tips", tags=["Tips"])
    app.include_router(personas_router, prefix="/api", tags=["AI Personas"])
    app.include_router(profile_router, prefix="/api/profile", tags=["Profile"])
    app.include_router(discovery_router, prefix="/api", tags=["Discovery"])
    app.include_router(activities_router, prefix="/api/activities", tags=["Activities"])
    app.include_router(streams_router, prefix="/api", tags=["Live Streams"])

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {"status": "running", "service": "GoonHub", "storage": settings.storage_backend.value}

    return app


if __name__ == "__main__":
    # Built per worker by uvicorn, so importing this module opens no storage
    uvicorn.run(
        "main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True, log_level="info"
    )
