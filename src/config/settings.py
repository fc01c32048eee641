"""
Configuration settings for the Suggestions Backend
"""

import os
import logging

# Configure logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Repository root, where main.py and static/ live
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Environment configuration
DB_PATH = os.getenv("DB_PATH", "/tmp/suggestions.db")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8080))
STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(PROJECT_ROOT, "static"))

# Substituted whenever a suggestion is submitted without an author name
PLACEHOLDER_NAME = "Anonymous"

# CORS settings
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]

logger.debug(f"Settings loaded - DB_PATH: {DB_PATH}, PORT: {PORT}, STATIC_DIR: {STATIC_DIR}")
