"""
Backend Launcher - Lemma Matcher API
====================================
Runs the FastAPI server with the host, port and log level from settings
"""

import sys
from pathlib import Path

import uvicorn

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from shared.config import get_settings


def main():
    """Launch the API server with auto-reload on source changes"""
    settings = get_settings()
    print("🚀 Lemma Matcher API")
    print(f"📡 http://localhost:{settings.backend_port}  (docs at /docs)")

    uvicorn.run(
        "backend.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=True,
        reload_dirs=[str(ROOT / "backend"), str(ROOT / "shared")],
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
