#!/usr/bin/env python3
"""
AdvisorDesk — Launch the API server.
Usage: python scripts/serve.py [--host 0.0.0.0] [--port 8000] [--reload] [--log-level debug]
"""
import os
import sys
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import HOST, PORT, LOG_LEVEL


def main():
    parser = argparse.ArgumentParser(description="Serve AdvisorDesk")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--log-level", default=LOG_LEVEL.lower(),
                        choices=["critical", "error", "warning", "info", "debug"])
    args = parser.parse_args()

    import uvicorn
    uvicorn.run(
        "advisordesk.app.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
