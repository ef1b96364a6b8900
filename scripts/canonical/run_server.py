"""
Start the Sector Intel API.

Usage:
    python scripts/canonical/run_server.py
    python scripts/canonical/run_server.py --host 0.0.0.0 --port 8080 --reload
"""
import argparse
import sys
from pathlib import Path

import uvicorn

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent.parent
sys.path.append(str(project_root))

from src.core.config import settings


def main():
    parser = argparse.ArgumentParser(description="Run the Sector Intel API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    args = parser.parse_args()

    print(f"--- SECTOR INTEL API ({settings.environment}) ---")
    print(f"[INFO] Docs available at: http://{args.host}:{args.port}/docs")

    uvicorn.run(
        "src.web.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
