import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from debtplan.config import settings
from debtplan.api.routes import health, loans, plans, strategies

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s  %(message)s",
    )
    logger.info("Planner API started, month cap %d", settings.MAX_MONTHS)
    yield


app = FastAPI(title="Debt Planner", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(strategies.router, prefix="/api")
app.include_router(plans.router, prefix="/api")
app.include_router(loans.router, prefix="/api")
