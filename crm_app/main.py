from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging

from crm_app.api.v1.router import router as api_v1_router
from crm_app.core.exceptions import (
    ActivityNotFoundError,
    AIServiceNotConfiguredError,
    AIServiceUnavailableError,
    AuthenticationRequiredError,
    ChatSessionNotFoundError,
    CustomerNotFoundError,
    CustomizationNotFoundError,
    DealNotFoundError,
    InvalidRequestError,
    PersistenceError,
    TicketNotFoundError,
    WorkflowRuleNotFoundError,
)
from crm_app.core.config import settings as app_settings
from crm_app.core.database import engine
from crm_app.core.rate_limit import limiter

# Configure logging
logging.basicConfig(level=app_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Dispose pooled database connections on shutdown."""
    logger.info("CRM API starting")
    yield
    await engine.dispose()
    logger.info("CRM API stopped")


app = FastAPI(
    title="AI CRM",
    description="CRM backend with AI insights and conversational UI customization",
    version="0.1.0",
    lifespan=lifespan,
)

# Attach rate limiter state so slowapi middleware can find it
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware – restricted to configured origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in app_settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router)


@app.exception_handler(AuthenticationRequiredError)
async def authentication_required_handler(
    request: Request, exc: AuthenticationRequiredError
):
    logger.warning("Unauthenticated request to %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=401,
        content={"detail": exc.detail, "type": "authentication_required"},
    )


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(request: Request, exc: InvalidRequestError):
    logger.warning("Invalid request: %s", exc.detail)
    return JSONResponse(
        status_code=400,
        content={"detail": exc.detail, "type": "invalid_request"},
    )


@app.exception_handler(CustomizationNotFoundError)
async def customization_not_found_handler(
    request: Request, exc: CustomizationNotFoundError
):
    logger.warning("Customization not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "customization_not_found"},
    )


@app.exception_handler(ChatSessionNotFoundError)
async def chat_session_not_found_handler(
    request: Request, exc: ChatSessionNotFoundError
):
    logger.warning("Chat session not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "chat_session_not_found"},
    )


@app.exception_handler(CustomerNotFoundError)
async def customer_not_found_handler(request: Request, exc: CustomerNotFoundError):
    logger.warning("Customer not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "customer_not_found"},
    )


@app.exception_handler(DealNotFoundError)
async def deal_not_found_handler(request: Request, exc: DealNotFoundError):
    logger.warning("Deal not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "deal_not_found"},
    )


@app.exception_handler(TicketNotFoundError)
async def ticket_not_found_handler(request: Request, exc: TicketNotFoundError):
    logger.warning("Ticket not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "ticket_not_found"},
    )


@app.exception_handler(ActivityNotFoundError)
async def activity_not_found_handler(request: Request, exc: ActivityNotFoundError):
    logger.warning("Activity not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "activity_not_found"},
    )


@app.exception_handler(WorkflowRuleNotFoundError)
async def workflow_not_found_handler(request: Request, exc: WorkflowRuleNotFoundError):
    logger.warning("Workflow rule not found: %s", exc.detail)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.detail, "type": "workflow_rule_not_found"},
    )


@app.exception_handler(AIServiceNotConfiguredError)
async def ai_not_configured_handler(request: Request, exc: AIServiceNotConfiguredError):
    logger.warning("AI not configured: %s", exc.detail)
    return JSONResponse(
        status_code=503,
        content={"detail": exc.detail, "type": "ai_not_configured"},
    )


@app.exception_handler(AIServiceUnavailableError)
async def ai_unavailable_handler(request: Request, exc: AIServiceUnavailableError):
    logger.error("AI service unavailable: %s", exc.detail)
    return JSONResponse(
        status_code=502,
        content={"detail": exc.detail, "type": "ai_unavailable"},
    )


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Persistence error: %s", exc.detail)
    return JSONResponse(
        status_code=500,
        content={"detail": exc.detail, "type": "persistence_error"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Request validation error: %s", exc.errors())
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Request validation failed",
            "errors": jsonable_encoder(exc.errors()),
            "type": "validation_error",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected/unhandled exceptions.

    Returns a generic 500 response so that raw stack traces are never
    leaked to the client.
    """
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected internal error occurred. Please try again later.",
            "type": "internal_server_error",
        },
    )
