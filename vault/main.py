import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from vault.config import settings
from vault.core.limiter import limiter
from vault.modules.account import routes as account_routes
from vault.modules.auth import routes as auth_routes
from vault.modules.board_shares import routes as board_shares_routes
from vault.modules.invites import routes as invites_routes
from vault.modules.items import routes as items_routes
from vault.modules.notifications import routes as notifications_routes
from vault.modules.profiles import routes as profiles_routes
from vault.modules.projects import routes as projects_routes
from vault.modules.public_shares import routes as public_shares_routes
from vault.modules.tags import routes as tags_routes
from vault.modules.teams import routes as teams_routes

API_PREFIX = "/api/v1"

# Bearer-token routers
AUTHENTICATED_ROUTERS = (
    auth_routes.router,
    profiles_routes.router,
    teams_routes.router,
    invites_routes.router,
    items_routes.router,
    tags_routes.router,
    projects_routes.router,
    public_shares_routes.router,
    board_shares_routes.router,
    notifications_routes.router,
    account_routes.router,
)

# Token-in-path routers for anonymous viewers; rate limited per client
PUBLIC_ROUTERS = (
    public_shares_routes.public_router,
    board_shares_routes.public_router,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"Referrer-Policy", b"no-referrer"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in AUTHENTICATED_ROUTERS + PUBLIC_ROUTERS:
    app.include_router(router, prefix=API_PREFIX)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Application startup ({settings.environment})")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    return {"status": "ready"}
