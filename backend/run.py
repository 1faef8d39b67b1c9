#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Serves the API with auto-reload on http://localhost:8000 (docs at /docs).
"""
import logging
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

from app.core.config import settings

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting development server on http://localhost:8000 (docs at /docs)")
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level=settings.log_level.lower())
