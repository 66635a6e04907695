# =============================================================================
# run.py - Starts the generation API with uvicorn
# =============================================================================
# Usage: python run.py
# API: http://127.0.0.1:8000 (POST /api/chat)
# HOST / PORT / RELOAD env vars override the defaults.
# =============================================================================

import os
import sys

import uvicorn

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "8000"))
RELOAD = os.environ.get("RELOAD", "").lower() in ("1", "true", "yes")

# Project root (where run.py lives)
ROOT = os.path.dirname(os.path.abspath(__file__))
if ROOT:
    os.chdir(ROOT)


def main() -> int:
    print(f"Starting App Idea Generator on http://{HOST}:{PORT} ...")
    try:
        uvicorn.run("appforge.main:app", host=HOST, port=PORT, reload=RELOAD)
    except KeyboardInterrupt:
        print("\nShutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
