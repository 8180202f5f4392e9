#!/usr/bin/env python3
"""
Run script for the School Directory API
"""
import uvicorn

from school_directory.config.settings import settings
from school_directory.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
