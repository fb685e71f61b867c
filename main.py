# main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from src.core.config import get_settings
from src.core.database import Base, engine, utcnow
from src.core.dependencies import get_db
from src.core.errors import register_error_handling
from src.core.rate_limit import limiter

from src.auth.router import router as auth_router
from src.users.router import router as users_router
from src.classroom.router import router as classroom_router
from src.dashboard.router import router as dashboard_router, coord_router
from src.notifications.router import router as notifications_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables if they do not exist...")
    Base.metadata.create_all(bind=engine)
    logger.info("Startup complete.")
    yield


app = FastAPI(
    title="Classroom Dashboard Backend",
    description="Google Classroom progress dashboards behind a JWT-secured API.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS: без списка origins разрешаем всех, но без credentials
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_error_handling(app)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

logger.info("Including routers...")
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(classroom_router)
app.include_router(dashboard_router)
app.include_router(coord_router)
app.include_router(notifications_router)


@app.get("/health", tags=["Status"])
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "Unhealthy"})
    return {"status": "OK", "timestamp": utcnow().isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000)
