import logging

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.main import app

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

logger.info("api/index.py initialized")

# Serverless platforms import ``app`` from here; running the module directly
# serves it locally on the configured port.

if __name__ == "__main__":
    import uvicorn

    port = get_settings().port
    logger.info("Add-on running at http://localhost:%s/manifest.json", port)
    uvicorn.run(app, host="0.0.0.0", port=port)
