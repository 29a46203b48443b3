"""
FastAPI app for the Chirp emoji feed
Run with: uvicorn api.main:app --reload
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.middleware import SlowAPIMiddleware

from api.auth_gate import AuthGateMiddleware, RouteMatcher
from api.config import PUBLIC_ROUTES, SIGN_IN_URL
from api.db import init_db, ping as db_ping
from api.errors import register_exception_handlers
from api.limiter import get_admission_controller, limiter
from api.logging_config import get_logger
from api.posts.router import router as posts_router

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Public routes: {', '.join(PUBLIC_ROUTES)}")
    yield


app = FastAPI(title="Chirp", version="1.0.0", lifespan=lifespan)
app.state.limiter = limiter

register_exception_handlers(app)

# Last added runs first: the gate classifies the request before slowapi counts it
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    AuthGateMiddleware,
    matcher=RouteMatcher(PUBLIC_ROUTES),
    sign_in_url=SIGN_IN_URL,
)

app.include_router(posts_router)


@app.get("/")
def root():
    return {"message": "Chirp API - emoji-only feed", "docs": "/docs"}


@app.get("/health")
def health():
    controller = get_admission_controller()
    limiter_ok = controller.is_available() if hasattr(controller, "is_available") else True
    database_ok = db_ping()
    return {
        "status": "ok" if database_ok and limiter_ok else "degraded",
        "database": database_ok,
        "rateLimiter": limiter_ok,
    }
