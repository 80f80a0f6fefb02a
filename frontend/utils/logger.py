import logging
import os

from app.chat_service.utils.logger import configure_logger

LOG_LEVEL = os.getenv("SAHAYAK_FRONTEND_LOG_LEVEL", "INFO").upper()

FRONTEND_FORMAT = "%(asctime)s | %(levelname)s | FRONTEND | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    return configure_logger(logging.getLogger(name), LOG_LEVEL, FRONTEND_FORMAT)
