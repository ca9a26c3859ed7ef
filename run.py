#!/usr/bin/env python3
"""
Run script for the Classroom backend
"""
import uvicorn

from classroom.config.settings import settings
from classroom.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
