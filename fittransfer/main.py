import logging
import sys
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from fittransfer.api.routes import fit
from fittransfer.config import server_settings
from fittransfer.utils.logging import InterceptHandler

VERSION = "0.1.0"


def setup_logging(level: str = "INFO"):
    # 1. Clear default handlers and set Loguru format
    logger.remove()

    def filter_health_checks(record):
        return "/health" not in record["message"]

    logger.add(
        sys.stdout,
        enqueue=True,
        backtrace=True,
        level=level,
        filter=filter_health_checks,
    )

    # 2. Prepare the list of loggers to intercept
    # uvicorn loggers may not be in loggerDict yet
    loggers = [name for name in logging.root.manager.loggerDict if name.startswith(("uvicorn", "fastapi"))] + [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
    ]

    for name in loggers:
        logging_logger = logging.getLogger(name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    # 3. Handle the root logger
    logging.getLogger().handlers = [InterceptHandler()]


def create_app() -> FastAPI:
    setup_logging(server_settings.log_level)

    _app = FastAPI(title="Fit Transfer API", version=VERSION)

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _app.include_router(fit.router, prefix="/api/fit", tags=["fit"])

    logger.info("Fit Transfer API setup complete.")
    return _app


app = create_app()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    logger.info(f"{request.method} {request.url.path} Status: {response.status_code} Duration: {duration:.2f}s")
    return response


@app.get("/")
async def root():
    return {"message": "Fit Transfer API", "version": VERSION}


@app.get("/health", tags=["health"])
async def health_check():
    """
    Check if the API is responsive. The calculators are pure, so there are no services to probe.
    """
    return {"status": "healthy", "timestamp": time.time()}
