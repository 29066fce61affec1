"""FastAPI application entry point.

Startup sequence: logging → config → model adapter → DB → recorder → gateway.
"""

import os
from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from pldbot.api.auth import PRINCIPAL_HEADER, get_principal
from pldbot.api.routes import router
from pldbot.api.schemas import ErrorDetail, ErrorResponse
from pldbot.chat.errors import GatewayError, InvalidArgument, Unauthenticated
from pldbot.chat.gateway import ChatGateway
from pldbot.core.config import GatewayConfig
from pldbot.core.database import init_db
from pldbot.core.llm_adapter import ModelAdapter
from pldbot.core.logging import configure_logging
from pldbot.core.recorder import UsageRecorder

load_dotenv()
configure_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("startup.begin")

    config = GatewayConfig.from_env()
    adapter = ModelAdapter(config)
    logger.info("startup.llm_initialized", model=config.model_name, healthy=adapter.is_healthy())

    init_db()
    logger.info("startup.db_initialized")

    recorder = UsageRecorder()
    app.state.gateway = ChatGateway(config, adapter, recorder)

    logger.info("startup.complete")
    yield
    recorder.shutdown(wait=True)
    logger.info("shutdown.complete")


app = FastAPI(
    title="PLD Bot API",
    description="Conversational gateway for LFPIORPI compliance questions",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(error: GatewayError) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(**error.to_dict()))
    return JSONResponse(status_code=error.status_code, content=body.model_dump())


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # An unparseable body from an anonymous caller is still an auth failure.
    if get_principal(request.headers.get(PRINCIPAL_HEADER)) is None:
        return _error_response(Unauthenticated())
    logger.warning("request.invalid", path=request.url.path, errors=len(exc.errors()))
    return _error_response(InvalidArgument("La solicitud no es válida"))


app.include_router(router)
