import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from quizforge.config import settings
from quizforge.modules.auth import routes as auth_routes
from quizforge.modules.users import routes as users_routes
from quizforge.modules.classes import routes as classes_routes
from quizforge.modules.exams import routes as exams_routes
from quizforge.modules.questions import routes as questions_routes
from quizforge.modules.students import routes as students_routes
from quizforge.modules.materials import routes as materials_routes
from quizforge.modules.submissions import routes as submissions_routes
from quizforge.modules.dashboard import routes as dashboard_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api"
MODULE_ROUTERS = (
    auth_routes.router,
    users_routes.router,
    classes_routes.router,
    exams_routes.router,
    questions_routes.router,
    students_routes.router,
    materials_routes.router,
    submissions_routes.router,
    dashboard_routes.router,
)
SECURITY_HEADERS = (
    (b"X-Content-Type-Options", b"nosniff"),
    (b"X-Frame-Options", b"DENY"),
    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
)


def supabase_configured() -> bool:
    return bool(settings.supabase_url and settings.supabase_key)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.app_name} starting ({settings.environment})")
    if not supabase_configured():
        logger.warning("SUPABASE_URL / SUPABASE_KEY are not set; backend calls will fail")
    if not settings.supabase_service_role_key:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY is not set; admin operations fall back to the anon client")
    yield
    logger.info(f"{settings.app_name} stopped")


limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
    lifespan=lifespan,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    detail = "Internal server error" if settings.is_production else str(exc)
    return JSONResponse(status_code=500, content={"detail": detail})


class SecurityHeadersMiddleware:
    """Adds SECURITY_HEADERS to every HTTP response"""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend(SECURITY_HEADERS)
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

for router in MODULE_ROUTERS:
    app.include_router(router, prefix=API_PREFIX)


@app.get("/")
async def root():
    return {"name": settings.app_name, "api": API_PREFIX, "docs": app.docs_url}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: Supabase must be configured"""
    if not supabase_configured():
        return JSONResponse(status_code=503, content={"status": "not ready", "detail": "Supabase is not configured"})
    return {"status": "ready"}
