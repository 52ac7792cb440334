"""ASGI entrypoint: `uvicorn app.main:app`. No business logic; only environment and logging setup."""

import logging

from dotenv import load_dotenv

load_dotenv()

from app.application import create_app
from app.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)

app = create_app(settings)
