"""FastAPI endpoints for the PLD chat gateway.

POST /chat - run one exchange with the assistant
GET /chat/suggestions - fixed starter questions
GET /chat/usage - caller's usage counter
GET /health - component health check
"""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy import text

from pldbot.api.auth import get_principal
from pldbot.api.schemas import ChatResponse, SuggestionsResponse, UsageResponse
from pldbot.chat.errors import Unauthenticated
from pldbot.chat.gateway import ChatGateway, Principal
from pldbot.chat.prompts import SUGGESTED_QUESTIONS
from pldbot.core.database import get_chat_usage, get_session

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_gateway(req: Request) -> ChatGateway:
    return req.app.state.gateway


def require_principal(principal: Principal | None = Depends(get_principal)) -> Principal:
    if principal is None:
        raise Unauthenticated()
    return principal


@router.post("/chat", response_model=ChatResponse)
def chat(
    payload: dict[str, Any] | None = Body(default=None),
    principal: Principal | None = Depends(get_principal),
    gateway: ChatGateway = Depends(get_gateway),
):
    """Validate, enrich, call the model, record usage, respond."""
    return gateway.handle(payload, principal)


@router.get("/chat/suggestions", response_model=SuggestionsResponse)
def suggestions(principal: Principal = Depends(require_principal)):
    """Starter questions for the chat widget."""
    return SuggestionsResponse(suggestions=list(SUGGESTED_QUESTIONS))


@router.get("/chat/usage", response_model=UsageResponse)
def usage(principal: Principal = Depends(require_principal)):
    """Usage counter for the caller's tenant."""
    snapshot = get_chat_usage(principal.id)
    return UsageResponse(
        tenant_id=snapshot.tenant_id,
        total_messages=snapshot.total_messages,
        last_used=snapshot.last_used,
        updated_at=snapshot.updated_at,
    )


@router.get("/health")
def health(req: Request):
    """Check health of all backend components."""
    components = {}

    gateway = req.app.state.gateway
    components["gemini"] = "ok" if gateway.adapter.is_healthy() else "error"

    try:
        with get_session() as session:
            session.execute(text("SELECT 1"))
        components["database"] = "ok"
    except Exception as e:
        logger.warning("health.database_failed", error=str(e))
        components["database"] = "error"

    errors = [k for k, v in components.items() if v == "error"]
    if not errors:
        status = "healthy"
    elif len(errors) == len(components):
        status = "unhealthy"
    else:
        status = "degraded"

    return {"status": status, "components": components}


@router.get("/")
@router.head("/")
def root_health():
    """Basic root health check for deployment platforms."""
    return {"status": "ok", "service": "pldbot-api"}
