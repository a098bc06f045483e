import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gully_backend.core.config import LOG_LEVEL
from gully_backend.core.database import init_db
from gully_backend.core.errors import GullyError

# --- Routers ---
from gully_backend.routes.match_routes import router as match_router
from gully_backend.routes.ranking_routes import router as ranking_router
from gully_backend.routes.challenge_routes import router as challenge_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Gully match settlement & stats")


@app.on_event("startup")
def on_startup():
    # 1️⃣ Init DB tables
    init_db()
    logger.info("✅ Database ready")


@app.exception_handler(GullyError)
async def gully_error_handler(request: Request, exc: GullyError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# --- Register routers ---
app.include_router(match_router, prefix="/matches", tags=["Matches"])
app.include_router(ranking_router, prefix="/rankings", tags=["Rankings"])
app.include_router(challenge_router, prefix="/challenges", tags=["Challenges"])
