#!/usr/bin/env python3
"""
Startup script for the FastAPI Loxo Document Upload API
"""
import uvicorn
from core.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
