import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import uvicorn

from stockkeeper.config import get_settings


def parse_args():
    parser = argparse.ArgumentParser(description="Run the Stockkeeper API server.")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (local development only).",
    )
    return parser.parse_args()


def main():
    args = parse_args()
    settings = get_settings()
    uvicorn.run(
        "stockkeeper.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
        # setup_logging() in stockkeeper.main owns the root logger.
        log_config=None,
    )


if __name__ == "__main__":
    main()
