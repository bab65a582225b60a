"""MerchFlow FastAPI application.

Processes order, catalogue and user commands synchronously via HTTP. Every
request runs inside the merchflow domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - unset / "test" → in-memory database
#   - "production"    → PostgreSQL at DATABASE_URL
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from merchflow.domain import merchflow
from merchflow.utils.logging import add_context, clear_context, get_logger

merchflow.init()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="MerchFlow API",
    description="Merchandise ordering with approval, fulfillment and dispatch",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the merchflow domain context and tag logs with the request."""
    clear_context()
    add_context(request_id=request.headers.get("X-Request-ID", uuid4().hex), path=request.url.path)
    with merchflow.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from merchflow.api import (  # noqa: E402
    admin_router,
    notification_router,
    order_router,
    product_router,
    register_error_handlers,
    session_router,
)

app.include_router(order_router)
app.include_router(product_router)
app.include_router(admin_router)
app.include_router(session_router)
app.include_router(notification_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": merchflow.name})
