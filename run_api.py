#!/usr/bin/env python3
"""
Helper script to run the PhotoFind API server.
Can be run from any directory.
"""
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.absolute()

sys.path.insert(0, str(PROJECT_ROOT))
os.chdir(PROJECT_ROOT)

if __name__ == "__main__":
    import uvicorn

    from photofind import config

    uvicorn.run(
        "photofind.api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=True,
    )
