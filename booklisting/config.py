"""Configuration management."""
import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Search client configuration."""

    # API
    BOOKS_API_URL = os.getenv("BOOKS_API_URL", "https://www.googleapis.com/books/v1/volumes")
    BOOKS_MAX_RESULTS = int(os.getenv("BOOKS_MAX_RESULTS", "10"))

    # Timeouts in seconds
    BOOKS_CONNECT_TIMEOUT = float(os.getenv("BOOKS_CONNECT_TIMEOUT", "15"))
    BOOKS_READ_TIMEOUT = float(os.getenv("BOOKS_READ_TIMEOUT", "10"))

    BOOKS_MAX_CONCURRENT = int(os.getenv("BOOKS_MAX_CONCURRENT", "5"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(level: Optional[str] = None):
    """
    Configure root logging for applications embedding the client.

    Args:
        level: Level name, defaults to Config.LOG_LEVEL
    """
    level = (level or Config.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
