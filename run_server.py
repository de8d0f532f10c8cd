import os

import uvicorn

from runcast.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="runcast_api")
    port = int(os.getenv("PORT", 8000))
    logger.info(f"Starting runcast API on port {port}")

    uvicorn.run(
        "runcast.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
    )
