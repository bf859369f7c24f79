#!/usr/bin/env python3
"""
Storefront Backend Runner
=========================

Run the storefront API in different modes.

Usage:
    python run_app.py                    # Development mode with auto-reload
    python run_app.py --mode prod        # Production mode, multiple workers
    python run_app.py --port 8001        # Custom port
    python run_app.py --host 127.0.0.1   # Custom host
"""

import argparse
import os
import sys

APP_PATH = "storefront.main:app"

def check_environment():
    """Warn about missing configuration before booting"""
    print("\n🔍 Checking environment...")

    if os.path.exists(".env"):
        print("✅ .env file found")
    else:
        print("⚠️  .env file not found, relying on environment variables")

    if not os.environ.get("SECRET_KEY") and not os.path.exists(".env"):
        print("❌ SECRET_KEY is not set")
        return False

    return True

def run_main_app(host="0.0.0.0", port=8000, reload=True, workers=1, log_level="info"):
    """Run the FastAPI application under uvicorn"""
    import uvicorn

    print(f"\n🚀 Starting Storefront API on {host}:{port}")
    print(f"📖 API Docs: http://{host}:{port}/api/docs")
    print("\n" + "=" * 50)

    uvicorn.run(
        APP_PATH,
        host=host,
        port=port,
        reload=reload,
        workers=None if reload else workers,
        log_level=log_level
    )

def build_parser():
    parser = argparse.ArgumentParser(
        description="Storefront Backend Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_app.py                      # Development mode on port 8000
  python run_app.py --port 8001          # Custom port
  python run_app.py --mode prod          # Production mode
        """
    )

    parser.add_argument(
        "--mode",
        choices=["dev", "prod"],
        default="dev",
        help="Server mode (default: dev)"
    )
    parser.add_argument(
        "--host",
        help="Host to bind to (default: HOST setting)"
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port to bind to (default: PORT setting)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Worker processes in prod mode (default: WORKERS setting)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload"
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Uvicorn log level (default: info)"
    )
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    if not check_environment():
        return 1

    # Settings validate on import, so load them only once SECRET_KEY is known
    from storefront.core.config import settings

    reload = not args.no_reload and args.mode != "prod"
    run_main_app(
        args.host or settings.HOST,
        args.port or settings.PORT,
        reload,
        args.workers or settings.WORKERS,
        args.log_level
    )

    return 0

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")
        sys.exit(0)
