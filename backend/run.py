#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Creates the schema (seeding default business hours on a fresh database) and
starts uvicorn with auto-reload. For local development only.
"""
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn  # noqa: E402

from repairdesk.init_db import init_db  # noqa: E402

if __name__ == "__main__":
    init_db()
    print("Starting RepairDesk development server")
    print("Access at: http://localhost:8000")
    print("API Docs: http://localhost:8000/docs")

    uvicorn.run("repairdesk.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
