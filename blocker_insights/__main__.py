"""Worker entry point: runs the scheduled team reports."""

import asyncio
import logging

from blocker_insights.app import lifespan
from blocker_insights.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def run_worker() -> None:
    """Run until cancelled."""
    async with lifespan(settings):
        logger.info("Worker running")
        await asyncio.Event().wait()


if __name__ == "__main__":
    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        logger.info("Worker stopped")
