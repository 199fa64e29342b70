"""
Run the admin API server.
Usage: python run_app.py [--reload]
"""

import argparse

import uvicorn

from recipe_admin.core.config import settings


def main():
    parser = argparse.ArgumentParser(description='Recipe pipeline admin API')
    parser.add_argument('--host', default=settings.host, help=f'Bind address (default: {settings.host})')
    parser.add_argument('--port', type=int, default=settings.port, help=f'Port (default: {settings.port})')
    parser.add_argument('--reload', action='store_true', help='Reload on code changes')
    args = parser.parse_args()

    print(f"Starting admin API on http://{args.host}:{args.port}")
    uvicorn.run("recipe_admin.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
