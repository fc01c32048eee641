"""
Entry point for the Suggestion Box backend
"""

import sys
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from app import app  # noqa: E402
from config.settings import HOST, PORT, DB_PATH  # noqa: E402

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Server starting on port {PORT} (db: {DB_PATH})")
    uvicorn.run(app, host=HOST, port=PORT)
