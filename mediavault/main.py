import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mediavault.api import health, info, download
from mediavault.config.settings import config
from mediavault.core.errors import GatewayError
from mediavault.core.logging import setup_logging, log_warning
from mediavault.core.middleware import RequestContextMiddleware
from mediavault.core.state import state
from mediavault.models.response import ErrorResponse
from mediavault.services.ytdlp import YTDLPCommandBuilder, SubprocessExecutor

logger = logging.getLogger(__name__)

VERSION_PROBE_TIMEOUT = 15.0


async def probe_ytdlp_version() -> str:
    """Best-effort `yt-dlp --version`; "unknown" when the binary is unusable"""
    try:
        result = await SubprocessExecutor.run(
            YTDLPCommandBuilder.build_version_command(),
            timeout=VERSION_PROBE_TIMEOUT
        )
    except (OSError, asyncio.TimeoutError) as e:
        logger.warning(f"yt-dlp not usable: {e}")
        return "unknown"

    if result.returncode != 0:
        logger.warning(f"yt-dlp --version exited with code {result.returncode}")
        return "unknown"
    return result.stdout.decode(errors="replace").strip() or "unknown"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    state.ytdlp_version = await probe_ytdlp_version()
    logger.info(f"MediaVault Pro server running on port {config.port}")
    logger.info(f"API ready with yt-dlp engine ({state.ytdlp_version})")
    yield


setup_logging()

app = FastAPI(
    title=config.api.title,
    description=config.api.description,
    version=config.api.version,
    docs_url="/docs" if config.api.debug else None,
    redoc_url=None,
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestContextMiddleware)

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(info.router, prefix="/api", tags=["Info"])
app.include_router(download.router, prefix="/api", tags=["Download"])


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    # 5xx are logged by the routes
    if exc.status_code < 500:
        log_warning(request, f"{exc.status_code} {exc.error}: {exc.message}")
    body = ErrorResponse(error=exc.error, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    log_warning(request, f"400 Invalid request: {messages}")
    body = ErrorResponse(error="Invalid request", message=" | ".join(messages))
    return JSONResponse(status_code=400, content=body.model_dump())


def run() -> None:
    """Console entry point"""
    # RequestContextMiddleware writes the access line
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.logging.level.lower(),
        access_log=False
    )


if __name__ == "__main__":
    run()
