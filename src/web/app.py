from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import contextlib
import logging

from src.core.config import settings
from src.core.database import engine, Base
from src.dashboard import database as dashboard_database  # noqa: F401 (registers models)

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Sector Intel",
    description="Normalized sector, company and corporate-event data over the Xano backend",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Sectors", "description": "Sector overview, companies and sub-sectors"},
        {"name": "Corporate Events", "description": "Corporate event detail with parties and insights"},
    ]
)

from src.web.routers import register_routers
from src.web.scheduler import start_scheduler, stop_scheduler, warm_if_cache_empty

register_routers(app)

@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize Database Tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Start Scheduler
    start_scheduler()
    await warm_if_cache_empty()

    yield

    # Stop Scheduler
    await stop_scheduler()

app.router.lifespan_context = lifespan

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"], # Next.js dev server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}
