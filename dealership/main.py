# dealership/main.py
"""
FastAPI application entry point.
Includes CORS, rate limiting, global error handlers, and all routers.
Every error leaves the API as {"error": "<message>"}.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from dealership.routers import (
    announcements, auth, categories, health, logs, moderation, orders, users, vehicles,
)
from dealership.database import create_tables
from dealership.config import settings
from dealership.middleware.rate_limit import limiter
from dealership.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Elite Vinewood Auto API",
    description="Vehicle catalog, checkout and admin back-office.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} → {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(
        ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"⚠️ Requête invalide - Vérifiez les champs: {fields}"},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"[RATE LIMIT] {request.client.host if request.client else 'unknown'} "
                   f"hit {exc.detail} on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": "❌ Trop de requêtes, veuillez réessayer plus tard"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "⚠️ Erreur interne du serveur"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(health.router,        prefix="/api", tags=["💚 Health"])
app.include_router(auth.router,          prefix="/api", tags=["🔑 Auth"])
app.include_router(vehicles.router,      prefix="/api", tags=["🚗 Vehicles"])
app.include_router(categories.router,    prefix="/api", tags=["📁 Categories"])
app.include_router(orders.router,        prefix="/api", tags=["📦 Orders"])
app.include_router(users.router,         prefix="/api", tags=["👥 Users"])
app.include_router(moderation.router,    prefix="/api", tags=["🛡️ Moderation"])
app.include_router(announcements.router, prefix="/api", tags=["📢 Announcements"])
app.include_router(logs.router,          prefix="/api", tags=["📋 Logs"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info(f"🚀 {settings.STORE_NAME} backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🔔 Webhooks configured: {settings.webhooks_configured}")
    logger.info(f"🌐 Listening on port {settings.PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Backend shutting down...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("dealership.main:app", host="0.0.0.0", port=settings.PORT)
