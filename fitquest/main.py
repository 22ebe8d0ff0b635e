from fastapi import FastAPI
import logging

from fitquest.api.routes import router
from fitquest.catalog import init_catalog
from fitquest.config import get_settings, load_env_file

load_env_file()

app = FastAPI(title="fitquest", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    catalog = init_catalog()
    logger.info("catalog loaded: %d quests, %d enemies", len(catalog.quests), len(catalog.enemies))


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "fitquest", "version": "0.1.0"}
