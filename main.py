from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
from app.routers import auth, categories, codes
from app.core.config import settings as app_settings
from app.core.db import engine

# Configure logging
logging.basicConfig(
    level=app_settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.
    """
    logger.info("Starting SIGEG API...")

    yield

    logger.info("Shutting down SIGEG API...")
    await engine.dispose()


app = FastAPI(
    title="SIGEG API",
    description="Group management: financial category permissions and access codes",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "sigeg-api"}


app.include_router(auth.router)
app.include_router(categories.router)
app.include_router(codes.router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8008, reload=True)
