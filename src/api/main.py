"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import health, stock
from src.config import settings
from src.domain.errors.stock_creation_error import StockCreationError

logger = structlog.get_logger(__name__)


def configure_logging(level: str = settings.log_level) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("stock_orchestrator_starting", autotrader_base_url=settings.autotrader_api_base_url)
    yield
    logger.info("stock_orchestrator_stopping")


async def stock_creation_error_handler(request: Request, exc: StockCreationError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = ", ".join(".".join(str(p) for p in err["loc"][1:]) or "body" for err in exc.errors())
    error = StockCreationError.validation("Invalid request body", f"Invalid fields: {fields}")
    return JSONResponse(status_code=error.http_status, content=error.to_response())


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Forecourt Stock Orchestrator",
        description="Publishes dealer vehicles to AutoTrader as stock listings.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StockCreationError, stock_creation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(health.router)
    app.include_router(stock.router)

    return app


app = create_app()
