from contextlib import asynccontextmanager

from fastapi import FastAPI

from tradedesk.api.routes import router
from tradedesk.dashboard.session import get_dashboard
from tradedesk.log import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    dashboard = get_dashboard()
    await dashboard.load_defaults()
    async with dashboard.live():
        logger.info("dashboard.started")
        yield
    logger.info("dashboard.stopped")


app = FastAPI(title="tradedesk", lifespan=lifespan)
app.include_router(router)
