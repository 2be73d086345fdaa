"""
Configuration settings for the Review Data Exporter.

Centralized configuration for export, preview and logging. Every value can be
overridden through an environment variable of the same name.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile

# Export
EXPORT_FILENAME = os.getenv("EXPORT_FILENAME", "reviews-export.csv")
EXPORT_DIR = os.getenv("EXPORT_DIR", tempfile.gettempdir())

# Calendar date rendering for createTime (strftime format)
DATE_FORMAT = os.getenv("DATE_FORMAT", "%m/%d/%Y")

# Preview
PREVIEW_LIMIT = int(os.getenv("PREVIEW_LIMIT", "5"))

# UI server
SERVER_NAME = os.getenv("SERVER_NAME", "127.0.0.1")
SERVER_PORT = int(os.getenv("SERVER_PORT", "7860"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = LOG_LEVEL) -> None:
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
