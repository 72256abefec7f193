import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from authgate.api.auth import router as auth_router
from authgate.api.protected import router as protected_router
from authgate.connectors.supabase import IdentityClient
from authgate.core.config import get_allowed_origins, get_log_level, get_port
from authgate.core.errors import TokenError

logger = logging.getLogger("authgate.main")


def setup_logging(log_level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(identity_client: Optional[IdentityClient] = None) -> FastAPI:
    """
    Build the API. The identity client is created once at startup and
    reused by every request; pass one in to substitute a fake.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "identity_client", None) is None:
            app.state.identity_client = IdentityClient.from_env()
            logger.info("Identity provider client initialized")
        yield
        logger.info("Shutting down")

    app = FastAPI(title="Secure Backend API", lifespan=lifespan)
    if identity_client is not None:
        app.state.identity_client = identity_client

    # In production, set ALLOWED_ORIGINS with comma-separated domains
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TokenError)
    async def token_error_handler(request: Request, exc: TokenError):
        return JSONResponse(
            status_code=401,
            content=exc.to_payload(),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Secure Backend API Running"

    app.include_router(protected_router, prefix="/api")
    app.include_router(auth_router, prefix="/auth")
    return app


setup_logging(get_log_level())
app = create_app()


def run() -> None:
    import uvicorn

    port = get_port()
    logger.info("Backend listening at http://localhost:%s", port)
    uvicorn.run("authgate.main:app", host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
