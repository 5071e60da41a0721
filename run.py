import logging

import uvicorn

from app.config import settings

# Default settings
HOST = "localhost"
PORT = 8000
RELOAD = True  # Enable live reload in local development

# Production config
if settings.ENV.lower() == "prod":
    HOST = "0.0.0.0"
    RELOAD = False
else:
    logging.getLogger(__name__).info("Running in local mode with auto-reload")

# Start the FastAPI app
if __name__ == "__main__":
    uvicorn.run("app.main:app", host=HOST, port=PORT, reload=RELOAD, log_level=settings.LOG_LEVEL.lower())
