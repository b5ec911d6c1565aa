"""
Start the admissions workflow API with uvicorn.

    python run.py                 # host/port from settings (API_HOST, API_PORT)
    python run.py --reload        # auto-reload while developing
    python run.py --port 8080 --workers 4
"""
import argparse

import uvicorn

from admissions.config.settings import settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the admissions workflow API server")
    parser.add_argument("--host", default=settings.api_host, help=f"Bind address (default: {settings.api_host})")
    parser.add_argument("--port", type=int, default=settings.api_port, help=f"Bind port (default: {settings.api_port})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (forces one worker)")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes (default: 1)")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    workers = 1 if args.reload else args.workers

    print(f"Admissions workflow API on http://{args.host}:{args.port} "
          f"(environment={settings.environment}, workers={workers}, reload={args.reload})")

    uvicorn.run(
        "admissions.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
