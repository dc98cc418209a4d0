#!/usr/bin/env python3
# backend/run.py
"""
Development server runner for the court booking API.

Uses DATABASE_URL / REDIS_URL from the environment or .env; defaults to a local
SQLite file and a local Redis.
"""
import logging
import os

import uvicorn

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    logger.info("Starting court booking API on http://%s:%s (docs at /docs)", host, port)
    uvicorn.run("app.main:app", host=host, port=port, reload=True, log_level="info")
